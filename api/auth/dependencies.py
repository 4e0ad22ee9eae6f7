"""
Auth dependencies for protected FastAPI routes.

Tokens are read from the `x-auth-token` header; `Authorization: Bearer <token>`
is accepted as well.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header

from core.dependencies import get_token_service
from core.errors import InvalidToken

from .schemas import Identity
from .security import TokenService

logger = logging.getLogger(__name__)


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        return ""

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise InvalidToken("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise InvalidToken("Authorization must be: Bearer <token>.")
    return token


def extract_token(x_auth_token: str | None, authorization: str | None) -> str:
    token = (x_auth_token or "").strip() or _extract_bearer_token(authorization)
    if not token:
        raise InvalidToken("Missing auth token.")
    return token


async def get_current_identity(
    x_auth_token: str | None = Header(default=None),
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    try:
        username = tokens.validate(extract_token(x_auth_token, authorization))
    except InvalidToken as exc:
        logger.info("Rejected request token: %s", exc.message)
        raise
    return Identity(username=username)
