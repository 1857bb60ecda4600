"""
FastAPI application factory for the Commute Check API.

Creates the app with all routes and lifespan management. The lifespan opens
the shared database connection, builds the traffic cache, and starts the
background refresh scheduler when a Directions API key is configured.
"""

import asyncio
import logging
import secrets
from contextlib import asynccontextmanager
from typing import Optional

import aiosqlite
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from commutecheck import __version__
from commutecheck.config.loader import load_config, get_database_path
from commutecheck.models.schema import ensure_database, get_connection
from commutecheck.server.models.common import ErrorResponse
from commutecheck.server.scheduler import run_refresh_scheduler
from commutecheck.traffic.cache import TrafficCache
from commutecheck.traffic.directions import DirectionsClient

logger = logging.getLogger("commutecheck.server")


async def open_database(db_path) -> aiosqlite.Connection:
    """Run migrations, then open the async connection used by the API."""
    sync_conn = get_connection(db_path)
    ensure_database(sync_conn)
    sync_conn.close()

    db = await aiosqlite.connect(str(db_path))
    db.row_factory = aiosqlite.Row

    # Match PRAGMAs from commutecheck/models/schema.py
    await db.execute("PRAGMA journal_mode=WAL")
    await db.execute("PRAGMA synchronous=NORMAL")
    await db.execute("PRAGMA temp_store=MEMORY")
    await db.execute("PRAGMA busy_timeout=5000")
    return db


def configure_services(
    app: FastAPI,
    config: dict,
    db: aiosqlite.Connection,
    directions: Optional[DirectionsClient] = None,
) -> TrafficCache:
    """Attach config, database, Directions client and traffic cache to app state."""
    if directions is None:
        directions = DirectionsClient(
            api_key=config.get("google_maps_api_key"),
            timeout=config.get("request_timeout_seconds", 30),
        )

    traffic_cache = TrafficCache(
        fetch_all=directions.fetch_all_travel_times,
        db=db,
        ttl_seconds=config.get("cache_ttl_seconds", 600),
    )

    admin_key = config.get("admin_api_key")
    if not admin_key:
        admin_key = secrets.token_hex(16)
        logger.warning("No admin API key configured; generated a temporary one for this run. "
                       "Set ADMIN_API_KEY to use a persistent key.")

    app.state.config = config
    app.state.db = db
    app.state.directions = directions
    app.state.traffic_cache = traffic_cache
    app.state.admin_api_key = admin_key
    return traffic_cache


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage database connection, Directions client and scheduler lifecycle."""
    config = app.state.config if hasattr(app.state, "config") else load_config()

    db = await open_database(get_database_path(config))
    traffic_cache = configure_services(
        app, config, db, directions=getattr(app.state, "directions", None),
    )
    directions = app.state.directions

    stop_event = asyncio.Event()
    scheduler_task = None
    if directions.is_configured():
        logger.info("Google Maps API configured - will fetch real traffic data")
        scheduler_task = asyncio.create_task(run_refresh_scheduler(
            traffic_cache,
            interval=config.get("refresh_interval_seconds", 600),
            stop_event=stop_event,
        ))
    else:
        logger.info("No Google Maps API key found - using placeholder data")
    app.state.scheduler_task = scheduler_task

    yield

    # Shutdown
    stop_event.set()
    if scheduler_task is not None:
        scheduler_task.cancel()
        try:
            await scheduler_task
        except asyncio.CancelledError:
            pass

    # A started refresh always runs to completion
    refresh_task = traffic_cache.state.refresh_task
    if refresh_task is not None:
        await asyncio.gather(refresh_task, return_exceptions=True)

    await directions.aclose()
    await db.close()


def create_app(config: dict = None, directions: Optional[DirectionsClient] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    A given Directions client replaces the one the lifespan would build from config.
    """
    app = FastAPI(
        title="Commute Check API",
        description="Manhattan / New Jersey crossing wait times",
        version=__version__,
        lifespan=lifespan,
    )

    if config:
        app.state.config = config
    if directions is not None:
        app.state.directions = directions

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error", detail=str(exc)).model_dump(),
        )

    from commutecheck.server.routes.health import router as health_router
    from commutecheck.server.routes.crossings import router as crossings_router
    from commutecheck.server.routes.readings import router as readings_router
    from commutecheck.server.routes.stats import router as stats_router

    app.include_router(health_router)
    app.include_router(crossings_router)
    app.include_router(readings_router)
    app.include_router(stats_router)

    return app
