"""
Place persistence (raw SQL).

Reads always join `coordinates` so callers get `latitude`/`longitude`
inline. Writes touch the `places` row only; keeping the coordinate row in
step is the job of `places.service`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from core import db, pagination

from .schemas import PlaceFilters

_PLACE_FIELDS = (
    "id, coordinate_id, name, address, category, sub_category, pet_classification, "
    "map_nbreviews, map_rating, map_pricelevel, map_url, map_place_id, "
    "created_at, updated_at, status"
)

_SELECT_WITH_COORDINATES = """
    SELECT
      p.id,
      p.coordinate_id,
      p.name,
      p.address,
      p.category,
      p.sub_category,
      p.pet_classification,
      p.map_nbreviews,
      p.map_rating,
      p.map_pricelevel,
      p.map_url,
      p.map_place_id,
      p.created_at,
      p.updated_at,
      p.status,
      c.latitude,
      c.longitude
    FROM places p
    JOIN coordinates c ON c.id = p.coordinate_id
"""

# Order matters: SET clauses are emitted in this order.
UPDATABLE_COLUMNS = (
    "name",
    "address",
    "category",
    "sub_category",
    "pet_classification",
    "map_nbreviews",
    "map_rating",
    "map_pricelevel",
    "map_url",
    "map_place_id",
    "status",
)


@dataclass(frozen=True)
class FilterRule:
    field: str
    column: str
    substring: bool = False

    def predicate(self, placeholder: int) -> str:
        if self.substring:
            return f"{self.column} ILIKE ${placeholder}"
        return f"{self.column} = ${placeholder}"

    def param(self, value: str) -> str:
        return f"%{value}%" if self.substring else value


SEARCH_FILTERS = (
    FilterRule("category", "p.category"),
    FilterRule("sub_category", "p.sub_category"),
    FilterRule("pet_classification", "p.pet_classification"),
    FilterRule("status", "p.status"),
    FilterRule("name", "p.name", substring=True),
    FilterRule("address", "p.address", substring=True),
    FilterRule("map_place_id", "p.map_place_id"),
)


def build_where(filters: PlaceFilters) -> tuple[str, list[Any]]:
    """
    Build `WHERE ...` from the filters that carry a non-empty value.

    Returns ("", []) when nothing is filtered. Placeholders are numbered
    from $1 in SEARCH_FILTERS order.
    """
    conditions: list[str] = []
    params: list[Any] = []
    for rule in SEARCH_FILTERS:
        value = getattr(filters, rule.field)
        if value is None or value == "":
            continue
        params.append(rule.param(value))
        conditions.append(rule.predicate(len(params)))

    if not conditions:
        return "", []
    return "WHERE " + " AND ".join(conditions), params


def build_update(place_id: UUID | str, fields: dict[str, Any]) -> tuple[str, list[Any]]:
    """
    Build an UPDATE that writes only the supplied columns.

    `updated_at` is always bumped, so an empty `fields` still produces a
    valid statement. Keys outside UPDATABLE_COLUMNS are ignored.
    """
    assignments: list[str] = []
    params: list[Any] = []
    for column in UPDATABLE_COLUMNS:
        if column not in fields:
            continue
        params.append(fields[column])
        assignments.append(f"{column} = ${len(params)}")

    assignments.append("updated_at = now()")
    params.append(place_id)

    sql = f"""
        UPDATE places
        SET {", ".join(assignments)}
        WHERE id = ${len(params)}
        RETURNING {_PLACE_FIELDS}
        """
    return sql, params


async def create_place(
    conn: db.Executor,
    *,
    coordinate_id: UUID | str,
    name: str,
    address: str,
    category: str,
    sub_category: str,
    pet_classification: str,
    map_nbreviews: int | None = None,
    map_rating: float | None = None,
    map_pricelevel: int | None = None,
    map_url: str | None = None,
    map_place_id: str | None = None,
    status: str = "active",
) -> dict[str, Any]:
    row = await db.fetch_one(
        conn,
        f"""
        INSERT INTO places (
          coordinate_id, name, address, category, sub_category, pet_classification,
          map_nbreviews, map_rating, map_pricelevel, map_url, map_place_id, updated_at, status
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, now(), $12)
        RETURNING {_PLACE_FIELDS}
        """,
        coordinate_id,
        name,
        address,
        category,
        sub_category,
        pet_classification,
        map_nbreviews,
        map_rating,
        map_pricelevel,
        map_url,
        map_place_id,
        status,
    )
    if row is None:
        raise RuntimeError("Failed to create place.")
    return row


async def get_place(conn: db.Executor, place_id: UUID | str) -> dict[str, Any] | None:
    return await db.fetch_one(
        conn,
        f"""
        {_SELECT_WITH_COORDINATES}
        WHERE p.id = $1
        """,
        place_id,
    )


async def _page(
    conn: db.Executor,
    where: str,
    params: list[Any],
    *,
    page: int,
    limit: int,
) -> dict[str, Any]:
    total = await db.fetch_count(
        conn,
        f"SELECT count(*) AS n FROM places p {where}",
        *params,
    )
    offset, _ = pagination.compute_offset_and_pages(page, limit, total)

    # LIMIT/OFFSET always come after the filter parameters.
    next_placeholder = len(params) + 1
    rows = await db.fetch_all(
        conn,
        f"""
        {_SELECT_WITH_COORDINATES}
        {where}
        ORDER BY p.created_at DESC
        LIMIT ${next_placeholder}
        OFFSET ${next_placeholder + 1}
        """,
        *params,
        limit,
        offset,
    )
    return pagination.wrap(rows, total, page, limit)


async def list_places(conn: db.Executor, *, page: int, limit: int) -> dict[str, Any]:
    return await _page(conn, "", [], page=page, limit=limit)


async def search_places(
    conn: db.Executor,
    filters: PlaceFilters,
    *,
    page: int,
    limit: int,
) -> dict[str, Any]:
    where, params = build_where(filters)
    return await _page(conn, where, params, page=page, limit=limit)


async def update_place(
    conn: db.Executor,
    place_id: UUID | str,
    fields: dict[str, Any],
) -> dict[str, Any] | None:
    """
    Returns the updated row (without coordinates), or None if no row matched.
    """
    sql, params = build_update(place_id, fields)
    return await db.fetch_one(conn, sql, *params)


async def delete_place(conn: db.Executor, place_id: UUID | str) -> bool:
    row = await db.fetch_one(
        conn,
        """
        DELETE FROM places
        WHERE id = $1
        RETURNING id
        """,
        place_id,
    )
    return row is not None
