"""
Bulk import endpoint.
"""

from __future__ import annotations

from dataclasses import asdict

import asyncpg
from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from core import db

from . import schemas, service

router = APIRouter()


@router.post("/api/places/import")
async def import_restaurants(
    request: schemas.ImportRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
    _: dict = Depends(auth_dependencies.require_roles("admin")),
) -> dict:
    summary = await service.import_restaurants(pool, request.restaurants)
    return asdict(summary)
