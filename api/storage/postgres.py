"""
PostgreSQL implementation of `Storage` (raw SQL over the shared asyncpg pool).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import asyncpg

from auth.schemas import User
from core import db
from core.errors import Conflict, NotFound, StoreError
from listings.schemas import Listing, ListingCreate

logger = logging.getLogger(__name__)

_LISTING_COLUMNS = """
    id, listed_by, name, pet_type, breed, sex,
    dob AS date_of_birth, created_at, updated_at
"""

# Request field -> column; the owner and timestamps are never client-writable.
_UPDATABLE_COLUMNS = {
    "name": "name",
    "pet_type": "pet_type",
    "breed": "breed",
    "sex": "sex",
    "date_of_birth": "dob",
}


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
        logger.exception("Store operation %s failed", operation)
        raise StoreError(f"Failed to {operation}.") from exc


def _to_user(row: dict[str, Any]) -> User:
    return User(
        id=int(row["id"]),
        username=str(row["username"]),
        password_hash=str(row["password_hash"]),
        created_at=row["created_at"],
    )


def _to_listing(row: dict[str, Any]) -> Listing:
    return Listing(**row)


class PostgresStorage:
    async def create_user(self, user: User) -> User:
        with _store_errors("create user"):
            try:
                row = await db.fetch_one(
                    """
                    INSERT INTO "user" (username, password_hash)
                    VALUES ($1, $2)
                    RETURNING id, username, password_hash, created_at
                    """,
                    user.username,
                    user.password_hash,
                )
            except asyncpg.UniqueViolationError as exc:
                raise Conflict(f"Username {user.username} is taken.") from exc
        if row is None:
            raise StoreError("Failed to create user.")
        return _to_user(row)

    async def user_exists(self, username: str) -> bool:
        with _store_errors("look up user"):
            row = await db.fetch_one(
                'SELECT 1 AS ok FROM "user" WHERE username = $1 LIMIT 1',
                username,
            )
        return row is not None

    async def get_user_by_username(self, username: str) -> User:
        with _store_errors("look up user"):
            row = await db.fetch_one(
                """
                SELECT id, username, password_hash, created_at
                FROM "user"
                WHERE username = $1
                """,
                username,
            )
        if row is None:
            raise NotFound(f"User {username} not found.")
        return _to_user(row)

    async def create_listing(self, owner: str, data: ListingCreate) -> Listing:
        with _store_errors("create listing"):
            row = await db.fetch_one(
                f"""
                INSERT INTO listing (listed_by, name, pet_type, breed, sex, dob)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {_LISTING_COLUMNS}
                """,
                owner,
                data.name,
                data.pet_type,
                data.breed,
                data.sex.value,
                data.date_of_birth,
            )
        if row is None:
            raise StoreError("Failed to create listing.")
        return _to_listing(row)

    async def get_listing_by_id(self, listing_id: int) -> Listing:
        with _store_errors("fetch listing"):
            row = await db.fetch_one(
                f"SELECT {_LISTING_COLUMNS} FROM listing WHERE id = $1",
                listing_id,
            )
        if row is None:
            raise NotFound(f"Listing {listing_id} not found.")
        return _to_listing(row)

    async def get_listings(self) -> list[Listing]:
        with _store_errors("fetch listings"):
            rows = await db.fetch_all(f"SELECT {_LISTING_COLUMNS} FROM listing ORDER BY id ASC")
        return [_to_listing(row) for row in rows]

    async def get_listings_by_username(self, username: str) -> list[Listing]:
        with _store_errors("fetch listings"):
            rows = await db.fetch_all(
                f"""
                SELECT {_LISTING_COLUMNS}
                FROM listing
                WHERE listed_by = $1
                ORDER BY id ASC
                """,
                username,
            )
        return [_to_listing(row) for row in rows]

    async def update_listing(self, listing_id: int, changes: dict) -> Listing:
        # Only the fields present in `changes` are written, so an explicit
        # None clears a nullable column.
        assignments = []
        args: list[Any] = [listing_id]
        for field, column in _UPDATABLE_COLUMNS.items():
            if field not in changes:
                continue
            value = changes[field]
            args.append(getattr(value, "value", value))
            assignments.append(f"{column} = ${len(args)}")
        assignments.append("updated_at = now()")

        with _store_errors("update listing"):
            row = await db.fetch_one(
                f"""
                UPDATE listing
                SET {", ".join(assignments)}
                WHERE id = $1
                RETURNING {_LISTING_COLUMNS}
                """,
                *args,
            )
        if row is None:
            raise NotFound(f"Listing {listing_id} not found.")
        return _to_listing(row)

    async def delete_listing_by_id(self, listing_id: int) -> None:
        with _store_errors("delete listing"):
            row = await db.fetch_one(
                "DELETE FROM listing WHERE id = $1 RETURNING id",
                listing_id,
            )
        if row is None:
            raise NotFound(f"Listing {listing_id} not found.")

    async def check_ownership(self, username: str, listing_id: int) -> bool:
        with _store_errors("check listing ownership"):
            row = await db.fetch_one(
                "SELECT listed_by FROM listing WHERE id = $1",
                listing_id,
            )
        if row is None:
            raise NotFound(f"Listing {listing_id} not found.")
        return str(row["listed_by"]) == username
