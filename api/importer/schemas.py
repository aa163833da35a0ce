"""
Pydantic schemas for the restaurant import.

`ImportRequest` keeps records untyped on purpose: each record is validated
on its own inside the import loop, so one bad record is reported as a
failure instead of rejecting the whole batch.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RestaurantCoordinates(BaseModel):
    latitude: float
    longitude: float


class RestaurantRecord(BaseModel):
    place_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    coordinates: RestaurantCoordinates
    reviews: int
    rating: float
    link: str = Field(..., min_length=1)
    about: list[Any]
    description: str | None = None


class ImportRequest(BaseModel):
    restaurants: list[Any]
