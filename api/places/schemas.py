"""
Pydantic schemas for place endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PlaceStatus = Literal["active", "inactive"]

_TEXT_FIELDS = ("name", "address", "category", "sub_category", "pet_classification")

# Columns that are NOT NULL in the database; an explicit null in a partial
# update is rejected instead of reaching the UPDATE statement.
_NON_NULLABLE = (*_TEXT_FIELDS, "latitude", "longitude", "status")


def _reject_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class PlaceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=200)
    sub_category: str = Field(..., min_length=1, max_length=200)
    pet_classification: str = Field(..., min_length=1, max_length=200)
    latitude: float
    longitude: float
    map_nbreviews: int | None = None
    map_rating: float | None = None
    map_pricelevel: int | None = None
    map_url: str | None = None
    map_place_id: str | None = None

    @field_validator(*_TEXT_FIELDS)
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _reject_blank(value)


class PlaceUpdate(BaseModel):
    """
    Partial update: only fields present in the request body are written.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1, max_length=200)
    sub_category: str | None = Field(default=None, min_length=1, max_length=200)
    pet_classification: str | None = Field(default=None, min_length=1, max_length=200)
    latitude: float | None = None
    longitude: float | None = None
    map_nbreviews: int | None = None
    map_rating: float | None = None
    map_pricelevel: int | None = None
    map_url: str | None = None
    map_place_id: str | None = None
    status: PlaceStatus | None = None

    @field_validator(*_TEXT_FIELDS)
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        return _reject_blank(value)

    @model_validator(mode="after")
    def _no_explicit_nulls(self) -> "PlaceUpdate":
        for name in _NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def supplied(self) -> dict:
        return self.model_dump(exclude_unset=True)


class PlaceFilters(BaseModel):
    """
    The closed set of search filters. Unknown keys are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    category: str | None = None
    sub_category: str | None = None
    pet_classification: str | None = None
    status: PlaceStatus | None = None
    name: str | None = None
    address: str | None = None
    map_place_id: str | None = None
