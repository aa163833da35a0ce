"""
Test doubles for the asyncpg pool/connection.

Two flavours:
- `RecordingConnection` returns scripted rows and records every statement,
  for asserting on the SQL the repositories build.
- `FakeDatabase` keeps coordinates/places in memory and replaces the
  repository functions, so service, importer and HTTP tests exercise the
  real transaction handling (acquire/commit/rollback) end to end.
"""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

import pytest

from coordinates import repository as coordinate_repository
from core import pagination
from places import repository as place_repository


class RecordingConnection:
    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _next(self, sql: str, args: tuple[Any, ...]) -> Any:
        self.calls.append((sql, args))
        return self.responses.pop(0) if self.responses else None

    async def fetchrow(self, sql: str, *args: Any) -> Any:
        return self._next(sql, args)

    async def fetch(self, sql: str, *args: Any) -> Any:
        return self._next(sql, args) or []


class FakeTransaction:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn
        self._snapshot: dict[str, Any] | None = None

    async def __aenter__(self) -> "FakeTransaction":
        self._snapshot = self.conn.db.snapshot()
        self.conn.db.begins += 1
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.conn.db.commits += 1
        else:
            self.conn.db.restore(self._snapshot)
            self.conn.db.rollbacks += 1
        return False


class FakeConnection:
    def __init__(self, db: "FakeDatabase") -> None:
        self.db = db

    def transaction(self) -> FakeTransaction:
        return FakeTransaction(self)


class FakePool:
    def __init__(self, db: "FakeDatabase") -> None:
        self.db = db

    @asynccontextmanager
    async def acquire(self):
        self.db.acquired += 1
        try:
            yield FakeConnection(self.db)
        finally:
            self.db.released += 1


class FakeDatabase:
    """In-memory stand-in for the coordinates/places tables."""

    def __init__(self) -> None:
        self.coordinates: dict[UUID, dict[str, Any]] = {}
        self.places: dict[UUID, dict[str, Any]] = {}
        self.fail_on: set[str] = set()
        self.acquired = 0
        self.released = 0
        self.begins = 0
        self.commits = 0
        self.rollbacks = 0
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy({"coordinates": self.coordinates, "places": self.places})

    def restore(self, snapshot: dict[str, Any] | None) -> None:
        if snapshot is not None:
            self.coordinates = snapshot["coordinates"]
            self.places = snapshot["places"]

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise RuntimeError(f"storage fault in {op}")

    def _key(self, value: UUID | str) -> UUID:
        return value if isinstance(value, UUID) else UUID(str(value))

    def _joined(self, place: dict[str, Any]) -> dict[str, Any]:
        coordinate = self.coordinates[place["coordinate_id"]]
        return {**place, "latitude": coordinate["latitude"], "longitude": coordinate["longitude"]}

    # coordinates.repository

    async def create_coordinate(self, conn, *, latitude, longitude):
        self._maybe_fail("create_coordinate")
        row = {"id": uuid4(), "latitude": latitude, "longitude": longitude, "created_at": self.now()}
        self.coordinates[row["id"]] = row
        return dict(row)

    async def get_coordinate(self, conn, coordinate_id):
        row = self.coordinates.get(self._key(coordinate_id))
        return dict(row) if row is not None else None

    async def update_coordinate(self, conn, coordinate_id, *, latitude, longitude):
        self._maybe_fail("update_coordinate")
        row = self.coordinates.get(self._key(coordinate_id))
        if row is None:
            return None
        row.update(latitude=latitude, longitude=longitude)
        return dict(row)

    async def delete_coordinate(self, conn, coordinate_id):
        self._maybe_fail("delete_coordinate")
        return self.coordinates.pop(self._key(coordinate_id), None) is not None

    # places.repository

    async def create_place(self, conn, *, coordinate_id, status="active", **fields):
        self._maybe_fail("create_place")
        now = self.now()
        row = {
            "id": uuid4(),
            "coordinate_id": coordinate_id,
            "map_nbreviews": None,
            "map_rating": None,
            "map_pricelevel": None,
            "map_url": None,
            "map_place_id": None,
            **fields,
            "status": status,
            "created_at": now,
            "updated_at": now,
        }
        self.places[row["id"]] = row
        return dict(row)

    async def get_place(self, conn, place_id):
        row = self.places.get(self._key(place_id))
        return self._joined(row) if row is not None else None

    def _page(self, rows, page, limit):
        rows = sorted(rows, key=lambda r: r["created_at"], reverse=True)
        offset, _ = pagination.compute_offset_and_pages(page, limit, len(rows))
        data = [self._joined(r) for r in rows[offset : offset + limit]]
        return pagination.wrap(data, len(rows), page, limit)

    async def list_places(self, conn, *, page, limit):
        return self._page(list(self.places.values()), page, limit)

    async def search_places(self, conn, filters, *, page, limit):
        rows = list(self.places.values())
        for rule in place_repository.SEARCH_FILTERS:
            value = getattr(filters, rule.field)
            if value is None or value == "":
                continue
            if rule.substring:
                rows = [r for r in rows if value.lower() in (r[rule.field] or "").lower()]
            else:
                rows = [r for r in rows if r[rule.field] == value]
        return self._page(rows, page, limit)

    async def update_place(self, conn, place_id, fields):
        self._maybe_fail("update_place")
        row = self.places.get(self._key(place_id))
        if row is None:
            return None
        for column in place_repository.UPDATABLE_COLUMNS:
            if column in fields:
                row[column] = fields[column]
        row["updated_at"] = self.now()
        return dict(row)

    async def delete_place(self, conn, place_id):
        self._maybe_fail("delete_place")
        return self.places.pop(self._key(place_id), None) is not None


_COORDINATE_OPS = ("create_coordinate", "get_coordinate", "update_coordinate", "delete_coordinate")
_PLACE_OPS = ("create_place", "get_place", "list_places", "search_places", "update_place", "delete_place")


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    database = FakeDatabase()
    for name in _COORDINATE_OPS:
        monkeypatch.setattr(coordinate_repository, name, getattr(database, name))
    for name in _PLACE_OPS:
        monkeypatch.setattr(place_repository, name, getattr(database, name))
    return database


@pytest.fixture
def fake_pool(fake_db: FakeDatabase) -> FakePool:
    return FakePool(fake_db)


def place_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "name": "Bark Cafe",
        "address": "12 Harbour Street",
        "category": "restaurant",
        "sub_category": "cafe",
        "pet_classification": "dogallowed",
        "latitude": 48.8566,
        "longitude": 2.3522,
    }
    payload.update(overrides)
    return payload
