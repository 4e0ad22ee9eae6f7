"""
Auth security helpers: password hashing, username rules and signed tokens.
"""

from __future__ import annotations

import time
from typing import Any

import bcrypt
import jwt

from core.config import Settings
from core.errors import InvalidToken, ValidationError

# The only algorithm tokens are signed and accepted with.
JWT_ALGORITHM = "HS256"
USERNAME_CLAIM = "username"

# bcrypt ignores everything past 72 bytes; newer releases reject it outright.
BCRYPT_MAX_BYTES = 72


def now_epoch_s() -> int:
    return int(time.time())


def normalize_username(raw: str) -> str:
    username = (raw or "").lower()
    if not username:
        raise ValidationError("Username is empty.")
    if any(ch.isspace() for ch in username):
        raise ValidationError("Username must not contain whitespace.")
    return username


def hash_password(plain_password: str, *, rounds: int = 10) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise ValidationError("Password is empty.")
    if len(password) > BCRYPT_MAX_BYTES:
        raise ValidationError("Password is too long.")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed or len(password) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


class TokenService:
    """
    Issues and validates HS256 tokens carrying a username claim and an expiry.
    """

    def __init__(self, *, secret: str, expire_minutes: int) -> None:
        if not secret:
            raise ValueError("Token signing secret is empty.")
        self._secret = secret
        self._ttl_s = max(1, int(expire_minutes)) * 60

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(secret=settings.jwt_secret, expire_minutes=settings.access_token_expire_minutes)

    def __repr__(self) -> str:
        return f"TokenService(algorithm={JWT_ALGORITHM!r}, ttl_s={self._ttl_s})"

    def issue(self, username: str) -> str:
        issued_at = now_epoch_s()
        payload = {
            USERNAME_CLAIM: username,
            "iat": issued_at,
            "exp": issued_at + self._ttl_s,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def validate(self, token: str) -> str:
        """
        Return the username the token was issued for, or raise InvalidToken.
        """
        raw = (token or "").strip()
        if not raw:
            raise InvalidToken("Token is missing.")

        try:
            payload: dict[str, Any] = jwt.decode(
                raw,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", USERNAME_CLAIM]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken("Token has expired.") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken("Invalid token.") from exc

        username = payload.get(USERNAME_CLAIM)
        if not isinstance(username, str) or not username.strip():
            raise InvalidToken("Token has no username claim.")
        return username
