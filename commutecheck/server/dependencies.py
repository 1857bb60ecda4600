"""FastAPI dependency injection for database, config and traffic services."""

import secrets
from typing import Optional

import aiosqlite
from fastapi import Header, HTTPException, Query, Request

from commutecheck.traffic.cache import TrafficCache
from commutecheck.traffic.directions import DirectionsClient


async def get_db(request: Request) -> aiosqlite.Connection:
    """Get the shared aiosqlite connection from app state."""
    return request.app.state.db


def get_config(request: Request) -> dict:
    """Get the loaded config from app state."""
    return request.app.state.config


def get_traffic_cache(request: Request) -> TrafficCache:
    """Get the traffic cache coordinator from app state."""
    return request.app.state.traffic_cache


def get_directions(request: Request) -> DirectionsClient:
    """Get the Directions API client from app state."""
    return request.app.state.directions


def require_admin_key(
    request: Request,
    x_api_key: Optional[str] = Header(None),
    api_key: Optional[str] = Query(None, alias="apiKey"),
) -> None:
    """Reject the request unless it carries the admin key (header or query)."""
    expected = request.app.state.admin_api_key
    provided = x_api_key or api_key
    if not provided or not secrets.compare_digest(provided.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid or missing API key")
