"""
Auth API schemas (request/response models) and the stored user entity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=72)


class AuthResponse(BaseModel):
    username: str
    token: str


class User(BaseModel):
    id: int | None = None
    username: str
    password_hash: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class Identity:
    """
    Caller identity recovered from a validated token.
    """

    username: str
