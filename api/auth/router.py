"""
Signup and login endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.config import Settings
from core.dependencies import get_settings, get_store, get_token_service
from storage import Storage

from . import schemas, service
from .security import TokenService

router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=schemas.AuthResponse)
async def signup(
    request: schemas.SignupRequest,
    store: Storage = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> schemas.AuthResponse:
    return await service.signup(
        request,
        store=store,
        tokens=tokens,
        bcrypt_rounds=settings.bcrypt_rounds,
    )


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    request: schemas.LoginRequest,
    store: Storage = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
) -> schemas.AuthResponse:
    return await service.login(request, store=store, tokens=tokens)
