"""Reading store statistics endpoint."""

from fastapi import APIRouter, Depends

import aiosqlite

from commutecheck.models.crossings import CROSSINGS
from commutecheck.server.dependencies import get_db, get_directions, get_traffic_cache
from commutecheck.server.models.stats import CrossingStats, StatsResponse
from commutecheck.server.queries.reading_queries import get_count, get_latest
from commutecheck.traffic.cache import TrafficCache
from commutecheck.traffic.directions import DirectionsClient

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def stats(
    db: aiosqlite.Connection = Depends(get_db),
    directions: DirectionsClient = Depends(get_directions),
    cache: TrafficCache = Depends(get_traffic_cache),
):
    crossings = []
    for crossing in CROSSINGS:
        latest = await get_latest(db, crossing.id)
        crossings.append(CrossingStats(
            id=crossing.id,
            name=crossing.name,
            direction=crossing.direction,
            reading_count=await get_count(db, crossing.id),
            latest_wait_time=latest.wait_time if latest else None,
            latest_recorded_at=latest.recorded_at if latest else None,
        ))

    return StatsResponse(
        crossings=crossings,
        api_configured=directions.is_configured(),
        cache_age=cache.cache_age_seconds(),
    )
