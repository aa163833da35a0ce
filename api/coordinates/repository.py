"""
Coordinate persistence (raw SQL).

A coordinate row belongs to exactly one place. These functions never open
their own transaction: pass a connection from `places.service` to make
them part of the place transaction.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from core import db

_COLUMNS = "id, latitude, longitude, created_at"


async def create_coordinate(conn: db.Executor, *, latitude: float, longitude: float) -> dict[str, Any]:
    row = await db.fetch_one(
        conn,
        f"""
        INSERT INTO coordinates (latitude, longitude)
        VALUES ($1, $2)
        RETURNING {_COLUMNS}
        """,
        latitude,
        longitude,
    )
    if row is None:
        raise RuntimeError("Failed to create coordinate.")
    return row


async def get_coordinate(conn: db.Executor, coordinate_id: UUID | str) -> dict[str, Any] | None:
    return await db.fetch_one(
        conn,
        f"""
        SELECT {_COLUMNS}
        FROM coordinates
        WHERE id = $1
        """,
        coordinate_id,
    )


async def update_coordinate(
    conn: db.Executor,
    coordinate_id: UUID | str,
    *,
    latitude: float,
    longitude: float,
) -> dict[str, Any] | None:
    return await db.fetch_one(
        conn,
        f"""
        UPDATE coordinates
        SET latitude = $1,
            longitude = $2
        WHERE id = $3
        RETURNING {_COLUMNS}
        """,
        latitude,
        longitude,
        coordinate_id,
    )


async def delete_coordinate(conn: db.Executor, coordinate_id: UUID | str) -> bool:
    row = await db.fetch_one(
        conn,
        """
        DELETE FROM coordinates
        WHERE id = $1
        RETURNING id
        """,
        coordinate_id,
    )
    return row is not None
