"""Liveness endpoint reporting database and traffic feed state."""

import logging
import sqlite3

from fastapi import APIRouter, Depends

import aiosqlite

from commutecheck import __version__
from commutecheck.server.dependencies import get_db, get_directions, get_traffic_cache
from commutecheck.traffic.cache import TrafficCache
from commutecheck.traffic.directions import DirectionsClient

logger = logging.getLogger("commutecheck.server")

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check(
    db: aiosqlite.Connection = Depends(get_db),
    directions: DirectionsClient = Depends(get_directions),
    cache: TrafficCache = Depends(get_traffic_cache),
):
    """Database reachability, whether live traffic is on, and cache freshness.

    A database failure degrades the status instead of failing the request.
    """
    database = "ok"
    try:
        cursor = await db.execute("SELECT COUNT(*) FROM readings")
        await cursor.fetchone()
    except (sqlite3.Error, ValueError) as e:
        logger.error("Health check database query failed: %s", e)
        database = "error"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "api_configured": directions.is_configured(),
        "cache_age": cache.cache_age_seconds(),
        "refreshing": cache.refreshing,
        "version": __version__,
    }
