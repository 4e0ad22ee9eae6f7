"""
Shared test fixtures.

The HTTP flow runs against `MemoryStorage`, an in-process implementation of the
`Storage` protocol, so no database is needed.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from auth.schemas import User
from auth.security import TokenService
from core.config import Settings
from core.errors import Conflict, NotFound
from listings.schemas import Listing, ListingCreate
from main import create_app

# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only-0123456789"


class MemoryStorage:
    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.listings: dict[int, Listing] = {}
        self._next_user_id = 1
        self._next_listing_id = 1

    async def create_user(self, user: User) -> User:
        if user.username in self.users:
            raise Conflict(f"Username {user.username} is taken.")
        stored = user.model_copy(
            update={"id": self._next_user_id, "created_at": datetime.now(timezone.utc)}
        )
        self._next_user_id += 1
        self.users[stored.username] = stored
        return stored

    async def user_exists(self, username: str) -> bool:
        return username in self.users

    async def get_user_by_username(self, username: str) -> User:
        try:
            return self.users[username]
        except KeyError:
            raise NotFound(f"User {username} not found.") from None

    async def create_listing(self, owner: str, data: ListingCreate) -> Listing:
        now = datetime.now(timezone.utc)
        listing = Listing(
            id=self._next_listing_id,
            listed_by=owner,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self._next_listing_id += 1
        self.listings[listing.id] = listing
        return listing

    async def get_listing_by_id(self, listing_id: int) -> Listing:
        try:
            return self.listings[listing_id]
        except KeyError:
            raise NotFound(f"Listing {listing_id} not found.") from None

    async def get_listings(self) -> list[Listing]:
        return [self.listings[key] for key in sorted(self.listings)]

    async def get_listings_by_username(self, username: str) -> list[Listing]:
        return [listing for listing in await self.get_listings() if listing.listed_by == username]

    async def update_listing(self, listing_id: int, changes: dict) -> Listing:
        current = await self.get_listing_by_id(listing_id)
        updated = current.model_copy(update={**changes, "updated_at": datetime.now(timezone.utc)})
        self.listings[listing_id] = updated
        return updated

    async def delete_listing_by_id(self, listing_id: int) -> None:
        if self.listings.pop(listing_id, None) is None:
            raise NotFound(f"Listing {listing_id} not found.")

    async def check_ownership(self, username: str, listing_id: int) -> bool:
        listing = await self.get_listing_by_id(listing_id)
        return listing.listed_by == username


def create_test_token(username: str = "alice", expired: bool = False) -> str:
    """Create a token the way the token service would, optionally already expired."""
    now = int(time.time())
    exp = now - 3600 if expired else now + 3600
    return jwt.encode({"username": username, "iat": now, "exp": exp}, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret=TEST_JWT_SECRET,
        access_token_expire_minutes=60,
        bcrypt_rounds=4,
        listen_addr="127.0.0.1:3000",
        database_url="postgresql://unused/test",
    )


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
def store() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def client(settings: Settings, store: MemoryStorage) -> TestClient:
    return TestClient(create_app(settings, store=store))


@pytest.fixture
def signup(client: TestClient):
    """Sign a user up and return the issued token."""

    def _signup(username: str, password: str = "secret1") -> str:
        response = client.post("/signup", json={"username": username, "password": password})
        assert response.status_code == 201, response.text
        return response.json()["token"]

    return _signup


@pytest.fixture
def rex() -> dict:
    return {
        "name": "Rex",
        "pet_type": "dog",
        "breed": "lab",
        "sex": "m",
        "date_of_birth": "2020-01-01",
    }
