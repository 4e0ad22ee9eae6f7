"""
Listing business logic.

Mutating and per-id routes go through `authorize`, which binds the caller's
token identity to the listing owner before any CRUD operation runs. A missing
listing is reported as 404 before ownership is considered, so callers can
tell a nonexistent id from one owned by someone else.
"""

from __future__ import annotations

import logging

from auth.schemas import Identity
from core.errors import Forbidden, ValidationError
from storage import Storage

from . import schemas

logger = logging.getLogger(__name__)


async def authorize(store: Storage, identity: Identity, listing_id: int) -> None:
    if not await store.check_ownership(identity.username, listing_id):
        logger.info("User %s denied access to listing %s", identity.username, listing_id)
        raise Forbidden("You do not own this listing.")


async def create_listing(
    store: Storage,
    identity: Identity,
    payload: schemas.ListingCreate,
) -> schemas.Listing:
    # The token may outlive the account it was issued for.
    if not await store.user_exists(identity.username):
        raise Forbidden("Unknown user.")

    listing = await store.create_listing(identity.username, payload)
    logger.info("User %s created listing %s", identity.username, listing.id)
    return listing


async def list_listings(store: Storage) -> list[schemas.Listing]:
    return await store.get_listings()


async def list_listings_by_username(store: Storage, username: str) -> list[schemas.Listing]:
    return await store.get_listings_by_username((username or "").lower())


async def get_listing(store: Storage, identity: Identity, listing_id: int) -> schemas.Listing:
    await authorize(store, identity, listing_id)
    return await store.get_listing_by_id(listing_id)


async def update_listing(
    store: Storage,
    identity: Identity,
    listing_id: int,
    payload: schemas.ListingUpdate,
) -> schemas.Listing:
    changes = payload.changes()
    if not changes:
        raise ValidationError("No fields to update.")
    cleared = sorted(
        field for field, value in changes.items() if value is None and field not in schemas.NULLABLE_FIELDS
    )
    if cleared:
        raise ValidationError(f"Field {cleared[0]} cannot be null.")

    await authorize(store, identity, listing_id)
    listing = await store.update_listing(listing_id, changes)
    logger.info("User %s updated listing %s", identity.username, listing_id)
    return listing


async def delete_listing(store: Storage, identity: Identity, listing_id: int) -> schemas.DeletedResponse:
    await authorize(store, identity, listing_id)
    await store.delete_listing_by_id(listing_id)
    logger.info("User %s deleted listing %s", identity.username, listing_id)
    return schemas.DeletedResponse(deleted=listing_id)
