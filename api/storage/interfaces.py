"""
Storage interface.

Services depend on `Storage`, not on the concrete implementation, so the
request flow can be exercised against any backend that honours this contract.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from auth.schemas import User
from listings.schemas import Listing, ListingCreate


@runtime_checkable
class Storage(Protocol):
    async def create_user(self, user: User) -> User:
        """
        Persist a new user. Raises Conflict if the username is taken.
        """
        ...

    async def user_exists(self, username: str) -> bool:
        ...

    async def get_user_by_username(self, username: str) -> User:
        """
        Raises NotFound if no such user exists.
        """
        ...

    async def create_listing(self, owner: str, data: ListingCreate) -> Listing:
        """
        Persist a listing owned by `owner`; id and timestamps are assigned here.
        """
        ...

    async def get_listing_by_id(self, listing_id: int) -> Listing:
        """
        Raises NotFound if the listing does not exist.
        """
        ...

    async def get_listings(self) -> list[Listing]:
        """
        All listings, ordered by id ascending.
        """
        ...

    async def get_listings_by_username(self, username: str) -> list[Listing]:
        ...

    async def update_listing(self, listing_id: int, changes: dict) -> Listing:
        """
        Apply a partial update and refresh `updated_at`. Raises NotFound.
        """
        ...

    async def delete_listing_by_id(self, listing_id: int) -> None:
        """
        Raises NotFound if there was nothing to delete.
        """
        ...

    async def check_ownership(self, username: str, listing_id: int) -> bool:
        """
        Whether `username` owns the listing. Raises NotFound if it is absent.
        """
        ...
