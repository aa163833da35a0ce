"""
Async database access helpers (raw SQL) using asyncpg.

The pool is an explicit handle: `main.py` creates it on startup, keeps it
on `app.state`, and closes it on shutdown. Request handlers receive it
through the `get_pool` dependency; the import CLI creates its own.

Every helper takes an `Executor` as its first argument. That is either the
pool itself (one-off statements) or a connection that is already inside a
transaction, so repository functions compose into larger transactions.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

from typing import Any, Union

import asyncpg
from fastapi import Request

from . import config

Executor = Union[asyncpg.Pool, asyncpg.Connection]


async def create_pool() -> asyncpg.Pool:
    return await asyncpg.create_pool(
        dsn=config.database_url(),
        min_size=min(config.db_pool_min_size(), config.db_pool_size()),
        max_size=config.db_pool_size(),
        max_inactive_connection_lifetime=config.db_idle_timeout_s(),
        command_timeout=config.db_command_timeout_s(),
    )


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return None
    await pool.close()


def get_pool(request: Request) -> asyncpg.Pool:
    """
    FastAPI dependency returning the pool opened in the app lifespan.
    """
    pool = getattr(request.app.state, "db_pool", None)
    if pool is None:
        raise RuntimeError("DB pool is not initialized. It is created in the app lifespan.")
    return pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(conn: Executor, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(conn: Executor, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_count(conn: Executor, sql: str, *args: Any) -> int:
    # `sql` must select a single column aliased `n`.
    row = await fetch_one(conn, sql, *args)
    return int((row or {}).get("n", 0))
