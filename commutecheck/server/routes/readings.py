"""Manual reading submission and forced refresh (admin key required)."""

import logging

from fastapi import APIRouter, Depends, HTTPException

import aiosqlite

from commutecheck.models.crossings import validate_reading
from commutecheck.server.dependencies import (
    get_db,
    get_directions,
    get_traffic_cache,
    require_admin_key,
)
from commutecheck.server.models.readings import (
    ReadingCreateRequest,
    ReadingCreateResponse,
    RefreshResponse,
)
from commutecheck.server.queries.reading_queries import add_reading
from commutecheck.traffic.cache import TrafficCache
from commutecheck.traffic.directions import DirectionsClient

logger = logging.getLogger("commutecheck.server")

router = APIRouter(
    prefix="/api",
    tags=["admin"],
    dependencies=[Depends(require_admin_key)],
)


@router.post("/readings", response_model=ReadingCreateResponse)
async def create_reading(
    request: ReadingCreateRequest,
    db: aiosqlite.Connection = Depends(get_db),
):
    try:
        validate_reading(request.crossing_id, request.wait_time)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    reading_id = await add_reading(db, request.crossing_id, request.wait_time)
    return ReadingCreateResponse(success=True, id=reading_id)


@router.post("/refresh", response_model=RefreshResponse)
async def force_refresh(
    directions: DirectionsClient = Depends(get_directions),
    cache: TrafficCache = Depends(get_traffic_cache),
):
    """Refresh regardless of cache age; joins a refresh already in flight."""
    if not directions.is_configured():
        raise HTTPException(status_code=503, detail="Live traffic lookups are not configured.")

    try:
        await cache.refresh()
    except Exception as exc:
        raise HTTPException(status_code=500, detail="Sorry, unable to refresh right now.") from exc

    return RefreshResponse(success=True, updated_at=cache.last_updated)
