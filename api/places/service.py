"""
Place orchestration.

A place and its coordinate are two rows in two tables. Every mutation here
runs on one pooled connection inside one transaction so both rows change
together or not at all:

    OPEN -> (coordinate write) -> place write -> COMMIT

Any exception rolls the transaction back and propagates. A missing place
also rolls back, but surfaces as `None` / `False` instead of an error so
routers can answer 404.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import asyncpg

from coordinates import repository as coordinate_repository
from core.pagination import PageParams

from . import repository, schemas

logger = logging.getLogger(__name__)


class _PlaceMissing(Exception):
    """Raised inside a transaction to roll it back when the place is gone."""


def _with_coordinates(place: dict[str, Any], latitude: float, longitude: float) -> dict[str, Any]:
    return {**place, "latitude": latitude, "longitude": longitude}


async def create_place(pool: asyncpg.Pool, payload: schemas.PlaceCreate) -> dict[str, Any]:
    fields = payload.model_dump(exclude={"latitude", "longitude"})
    try:
        async with pool.acquire() as conn:
            async with conn.transaction():
                coordinate = await coordinate_repository.create_coordinate(
                    conn,
                    latitude=payload.latitude,
                    longitude=payload.longitude,
                )
                place = await repository.create_place(
                    conn,
                    coordinate_id=coordinate["id"],
                    status="active",
                    **fields,
                )
    except Exception as exc:
        logger.error("place_create_failed name=%s error=%s", payload.name, exc)
        raise

    logger.info("place_created place_id=%s coordinate_id=%s", place["id"], coordinate["id"])
    return _with_coordinates(place, coordinate["latitude"], coordinate["longitude"])


async def get_place(pool: asyncpg.Pool, place_id: UUID | str) -> dict[str, Any] | None:
    return await repository.get_place(pool, place_id)


async def list_places(pool: asyncpg.Pool, params: PageParams) -> dict[str, Any]:
    return await repository.list_places(pool, page=params.page, limit=params.limit)


async def search_places(
    pool: asyncpg.Pool,
    filters: schemas.PlaceFilters,
    params: PageParams,
) -> dict[str, Any]:
    return await repository.search_places(pool, filters, page=params.page, limit=params.limit)


async def update_place(
    pool: asyncpg.Pool,
    place_id: UUID | str,
    payload: schemas.PlaceUpdate,
) -> dict[str, Any] | None:
    """
    Apply a partial update. Returns the fresh place, or None if it does not exist.

    When only one coordinate axis is supplied, the other keeps its stored
    value. An empty payload still bumps `updated_at`.
    """
    fields = payload.supplied()
    latitude = fields.pop("latitude", None)
    longitude = fields.pop("longitude", None)
    moves = latitude is not None or longitude is not None

    try:
        async with pool.acquire() as conn:
            async with conn.transaction():
                current = await repository.get_place(conn, place_id)
                if current is None:
                    raise _PlaceMissing()

                if moves:
                    await coordinate_repository.update_coordinate(
                        conn,
                        current["coordinate_id"],
                        latitude=latitude if latitude is not None else current["latitude"],
                        longitude=longitude if longitude is not None else current["longitude"],
                    )

                updated = await repository.update_place(conn, place_id, fields)
                if updated is None:
                    raise _PlaceMissing()

            if moves:
                # Committed; read back the joined row so the result shows the new position.
                result = await repository.get_place(conn, place_id)
            else:
                result = _with_coordinates(updated, current["latitude"], current["longitude"])
    except _PlaceMissing:
        logger.info("place_update_not_found place_id=%s", place_id)
        return None
    except Exception as exc:
        logger.error("place_update_failed place_id=%s error=%s", place_id, exc)
        raise

    logger.info("place_updated place_id=%s fields=%s moved=%s", place_id, sorted(fields), moves)
    return result


async def delete_place(pool: asyncpg.Pool, place_id: UUID | str) -> bool:
    """
    Delete a place and its coordinate. Returns False if the place does not exist.
    """
    try:
        async with pool.acquire() as conn:
            async with conn.transaction():
                current = await repository.get_place(conn, place_id)
                if current is None:
                    raise _PlaceMissing()

                if not await repository.delete_place(conn, place_id):
                    raise _PlaceMissing()

                await coordinate_repository.delete_coordinate(conn, current["coordinate_id"])
    except _PlaceMissing:
        logger.info("place_delete_not_found place_id=%s", place_id)
        return False
    except Exception as exc:
        logger.error("place_delete_failed place_id=%s error=%s", place_id, exc)
        raise

    logger.info("place_deleted place_id=%s coordinate_id=%s", place_id, current["coordinate_id"])
    return True
