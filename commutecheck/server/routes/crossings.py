"""Current crossing wait times and history heatmap endpoints."""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

import aiosqlite

from commutecheck.models.crossings import CROSSINGS, get_status, is_known_crossing
from commutecheck.models.entities import Crossing, CrossingResult
from commutecheck.server.dependencies import (
    get_config,
    get_db,
    get_directions,
    get_traffic_cache,
)
from commutecheck.server.models.crossings import NO_WAIT_TIME, CrossingStatus, HistoryResponse
from commutecheck.server.queries.heatmap_queries import get_historical_data
from commutecheck.traffic.cache import TrafficCache
from commutecheck.traffic.directions import DirectionsClient
from commutecheck.traffic.placeholder import build_placeholder_results

logger = logging.getLogger("commutecheck.server")

router = APIRouter(prefix="/api", tags=["crossings"])


def _crossing_status(
    crossing: Crossing,
    result: Optional[CrossingResult],
    updated_at: datetime,
) -> CrossingStatus:
    wait_time = result.wait_time if result else None
    status, status_class = get_status(wait_time)
    return CrossingStatus(
        id=crossing.id,
        name=crossing.name,
        direction=crossing.direction,
        area=crossing.area,
        icon=crossing.icon,
        wait_time=wait_time if wait_time is not None else NO_WAIT_TIME,
        status=status,
        status_class=status_class,
        updated_at=updated_at,
        error=result.error if result else None,
        placeholder=result.placeholder if result else False,
    )


@router.get("/crossings", response_model=List[CrossingStatus])
async def list_crossings(
    config: dict = Depends(get_config),
    directions: DirectionsClient = Depends(get_directions),
    cache: TrafficCache = Depends(get_traffic_cache),
):
    """Current wait time and status for every crossing.

    Without an API key this serves placeholder data and never touches the
    cache. A failed refresh falls back to stale cached data when there is any.
    """
    if not directions.is_configured():
        logger.info("No API key configured, using placeholder data")
        results = build_placeholder_results(
            config.get("placeholder_min_wait", 10),
            config.get("placeholder_max_wait", 40),
        )
        updated_at = datetime.now()
    else:
        try:
            results = await cache.get_current_data()
        except Exception as e:
            if cache.data is None:
                raise HTTPException(
                    status_code=503,
                    detail="Sorry, traffic data is temporarily unavailable.",
                ) from e
            logger.warning("Serving stale traffic data after failed refresh: %s", e)
            results = cache.data
        updated_at = cache.last_updated or datetime.now()

    by_id: Dict[str, CrossingResult] = {r.crossing_id: r for r in results}
    return [_crossing_status(c, by_id.get(c.id), updated_at) for c in CROSSINGS]


@router.get("/crossings/{crossing_id}/history", response_model=HistoryResponse)
async def crossing_history(
    crossing_id: str,
    db: aiosqlite.Connection = Depends(get_db),
):
    """Monday-first day/hour heatmap of historical wait times."""
    if not is_known_crossing(crossing_id):
        raise HTTPException(status_code=400, detail="Invalid crossing ID")

    data = await get_historical_data(db, crossing_id)
    return HistoryResponse(**data)
