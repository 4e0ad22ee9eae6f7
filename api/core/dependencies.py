"""
FastAPI dependencies exposing the objects `create_app` wires onto `app.state`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from .config import Settings

if TYPE_CHECKING:
    from auth.security import TokenService
    from storage import Storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> "Storage":
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Storage is not initialized. The app lifespan has not run.")
    return store


def get_token_service(request: Request) -> "TokenService":
    return request.app.state.tokens
