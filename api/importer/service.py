"""
Bulk restaurant import.

Records come from a maps scraper. `place_id` is the scraper's identifier
and is stored as `places.map_place_id`; it decides whether a record
creates a new place or refreshes an existing one.

Each record is handled on its own (own transaction, own error handling),
strictly one after another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

import asyncpg
from pydantic import ValidationError

from core.pagination import PageParams
from places import schemas as place_schemas
from places import service as place_service

from .schemas import RestaurantRecord

logger = logging.getLogger(__name__)

RESTAURANT_CATEGORY = "restaurant"
PETS_ATTRIBUTE_ID = "pets"
PETS_ALLOWED = "dogallowed"
PETS_UNKNOWN = "false"


@dataclass(frozen=True)
class ImportFailure:
    label: str
    error: str


@dataclass
class ImportSummary:
    total: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    failures: list[ImportFailure] = field(default_factory=list)


def extract_pet_policy(about: Iterable[Any]) -> str:
    """
    "dogallowed" if any `about` attribute has id "pets", else "false".
    """
    for item in about:
        if isinstance(item, dict) and item.get("id") == PETS_ATTRIBUTE_ID:
            return PETS_ALLOWED
    return PETS_UNKNOWN


def _label(raw: Any, index: int) -> str:
    if isinstance(raw, dict):
        for key in ("name", "place_id"):
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return f"record[{index}]"


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
    return str(exc) or exc.__class__.__name__


async def _find_existing(pool: asyncpg.Pool, map_place_id: str) -> dict[str, Any] | None:
    page = await place_service.search_places(
        pool,
        place_schemas.PlaceFilters(map_place_id=map_place_id),
        PageParams(page=1, limit=1),
    )
    return page["data"][0] if page["data"] else None


async def import_record(pool: asyncpg.Pool, record: RestaurantRecord) -> str:
    """
    Upsert one record. Returns "created" or "updated".
    """
    pet_policy = extract_pet_policy(record.about)
    existing = await _find_existing(pool, record.place_id)

    if existing is not None:
        # Only the volatile review data and pet policy are refreshed.
        updated = await place_service.update_place(
            pool,
            existing["id"],
            place_schemas.PlaceUpdate(
                map_nbreviews=record.reviews,
                map_rating=record.rating,
                pet_classification=pet_policy,
            ),
        )
        if updated is None:
            raise LookupError(f"Place {existing['id']} was deleted during import.")
        return "updated"

    await place_service.create_place(
        pool,
        place_schemas.PlaceCreate(
            name=record.name,
            address=record.address,
            category=RESTAURANT_CATEGORY,
            sub_category=RESTAURANT_CATEGORY,
            pet_classification=pet_policy,
            latitude=record.coordinates.latitude,
            longitude=record.coordinates.longitude,
            map_nbreviews=record.reviews,
            map_rating=record.rating,
            map_url=record.link,
            map_place_id=record.place_id,
        ),
    )
    return "created"


async def import_restaurants(pool: asyncpg.Pool, records: Iterable[Any]) -> ImportSummary:
    summary = ImportSummary()

    for index, raw in enumerate(records):
        summary.total += 1
        label = _label(raw, index)
        try:
            record = RestaurantRecord.model_validate(raw)
            outcome = await import_record(pool, record)
        except Exception as exc:
            logger.warning("restaurant_import_failed label=%s error=%s", label, _describe(exc))
            summary.failed += 1
            summary.failures.append(ImportFailure(label=label, error=_describe(exc)))
            continue

        if outcome == "created":
            summary.created += 1
        else:
            summary.updated += 1
        logger.debug("restaurant_%s label=%s", outcome, label)

    logger.info(
        "restaurant_import_complete total=%s created=%s updated=%s failed=%s",
        summary.total,
        summary.created,
        summary.updated,
        summary.failed,
    )
    return summary
