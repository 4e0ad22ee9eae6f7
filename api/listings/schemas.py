"""
Listing schemas: request bodies and the stored listing entity.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class Sex(str, Enum):
    MALE = "m"
    FEMALE = "f"


class ListingCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    pet_type: str = Field(..., min_length=1, max_length=50)
    breed: str | None = Field(default=None, max_length=50)
    sex: Sex
    date_of_birth: date


# Only breed may be cleared; the other columns are NOT NULL.
NULLABLE_FIELDS = frozenset({"breed"})


class ListingUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    pet_type: str | None = Field(default=None, min_length=1, max_length=50)
    breed: str | None = Field(default=None, max_length=50)
    sex: Sex | None = None
    date_of_birth: date | None = None

    def changes(self) -> dict:
        """
        Fields present in the request body, including explicit nulls.
        """
        return self.model_dump(exclude_unset=True)


class Listing(BaseModel):
    id: int
    listed_by: str
    name: str
    pet_type: str
    breed: str | None = None
    sex: Sex
    date_of_birth: date
    created_at: datetime
    updated_at: datetime


class DeletedResponse(BaseModel):
    deleted: int
