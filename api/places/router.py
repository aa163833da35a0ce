"""
Place API endpoints.
"""

from __future__ import annotations

from uuid import UUID

import asyncpg
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from auth import dependencies as auth_dependencies
from core import db, pagination

from . import schemas, service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_user)])


@router.get("/api/places")
async def list_places(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    return await service.list_places(pool, pagination.parse_params(page, limit))


# Declared before /api/places/{place_id} so "search" is not read as an id.
@router.get("/api/places/search")
async def search_places(
    category: str | None = Query(default=None, max_length=200),
    sub_category: str | None = Query(default=None, max_length=200),
    pet_classification: str | None = Query(default=None, max_length=200),
    place_status: schemas.PlaceStatus | None = Query(default=None, alias="status"),
    name: str | None = Query(default=None, max_length=255),
    address: str | None = Query(default=None),
    map_place_id: str | None = Query(default=None),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    filters = schemas.PlaceFilters(
        category=category,
        sub_category=sub_category,
        pet_classification=pet_classification,
        status=place_status,
        name=name,
        address=address,
        map_place_id=map_place_id,
    )
    return await service.search_places(pool, filters, pagination.parse_params(page, limit))


@router.get("/api/places/{place_id}")
async def get_place(
    place_id: UUID,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    place = await service.get_place(pool, place_id)
    if place is None:
        raise HTTPException(status_code=404, detail=f"Place with ID {place_id} not found.")
    return place


@router.post("/api/places", status_code=status.HTTP_201_CREATED)
async def create_place(
    payload: schemas.PlaceCreate,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    return await service.create_place(pool, payload)


@router.put("/api/places/{place_id}")
async def update_place(
    place_id: UUID,
    payload: schemas.PlaceUpdate,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    place = await service.update_place(pool, place_id, payload)
    if place is None:
        raise HTTPException(status_code=404, detail=f"Place with ID {place_id} not found.")
    return place


@router.delete("/api/places/{place_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_place(
    place_id: UUID,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> Response:
    deleted = await service.delete_place(pool, place_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Place with ID {place_id} not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
