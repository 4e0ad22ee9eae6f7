"""
Auth business logic.
"""

from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool

from core.errors import Conflict, Forbidden, NotFound
from storage import Storage

from . import schemas, security

logger = logging.getLogger(__name__)


async def signup(
    payload: schemas.SignupRequest,
    *,
    store: Storage,
    tokens: security.TokenService,
    bcrypt_rounds: int,
) -> schemas.AuthResponse:
    username = security.normalize_username(payload.username)

    if await store.user_exists(username):
        raise Conflict(f"Username {username} is taken.")

    # bcrypt is deliberately slow; keep it off the event loop.
    password_hash = await run_in_threadpool(
        security.hash_password,
        payload.password,
        rounds=bcrypt_rounds,
    )
    user = await store.create_user(schemas.User(username=username, password_hash=password_hash))
    logger.info("User %s signed up", user.username)

    return schemas.AuthResponse(username=user.username, token=tokens.issue(user.username))


async def login(
    payload: schemas.LoginRequest,
    *,
    store: Storage,
    tokens: security.TokenService,
) -> schemas.AuthResponse:
    username = (payload.username or "").lower()
    try:
        user = await store.get_user_by_username(username)
    except NotFound:
        user = None

    is_valid = user is not None and await run_in_threadpool(
        security.verify_password,
        payload.password,
        user.password_hash,
    )
    if not is_valid:
        logger.info("Failed login for %s", username)
        raise Forbidden("Invalid username or password.")

    return schemas.AuthResponse(username=user.username, token=tokens.issue(user.username))
