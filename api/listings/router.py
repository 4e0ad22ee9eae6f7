"""
Listing API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies
from auth.schemas import Identity
from core.dependencies import get_store
from core.errors import ValidationError
from storage import Storage

from . import schemas, service

router = APIRouter()


def parse_listing_id(listing_id: str) -> int:
    raw = (listing_id or "").strip()
    # isdigit() alone admits non-ASCII digits such as "²" that int() rejects.
    if not (raw.isascii() and raw.isdigit()):
        raise ValidationError(f"Invalid id provided {listing_id}.")
    return int(raw)


@router.get("/listings", response_model=list[schemas.Listing])
async def get_listings(store: Storage = Depends(get_store)) -> list[schemas.Listing]:
    return await service.list_listings(store)


@router.post("/listings", status_code=status.HTTP_201_CREATED, response_model=schemas.Listing)
async def create_listing(
    request: schemas.ListingCreate,
    identity: Identity = Depends(auth_dependencies.get_current_identity),
    store: Storage = Depends(get_store),
) -> schemas.Listing:
    return await service.create_listing(store, identity, request)


# Registered ahead of the /listings/{listing_id} routes so that a user named
# "listings" still has a public index at /listings/listings.
@router.get("/{username}/listings", response_model=list[schemas.Listing])
async def get_listings_by_username(
    username: str,
    store: Storage = Depends(get_store),
) -> list[schemas.Listing]:
    return await service.list_listings_by_username(store, username)


@router.get("/listings/{listing_id}", response_model=schemas.Listing)
async def get_listing(
    listing_id: str,
    identity: Identity = Depends(auth_dependencies.get_current_identity),
    store: Storage = Depends(get_store),
) -> schemas.Listing:
    return await service.get_listing(store, identity, parse_listing_id(listing_id))


@router.put("/listings/{listing_id}", response_model=schemas.Listing)
async def update_listing(
    listing_id: str,
    request: schemas.ListingUpdate,
    identity: Identity = Depends(auth_dependencies.get_current_identity),
    store: Storage = Depends(get_store),
) -> schemas.Listing:
    return await service.update_listing(store, identity, parse_listing_id(listing_id), request)


@router.delete("/listings/{listing_id}", response_model=schemas.DeletedResponse)
async def delete_listing(
    listing_id: str,
    identity: Identity = Depends(auth_dependencies.get_current_identity),
    store: Storage = Depends(get_store),
) -> schemas.DeletedResponse:
    return await service.delete_listing(store, identity, parse_listing_id(listing_id))

