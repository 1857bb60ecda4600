"""
Google Maps Directions client.

Each crossing is a fixed origin/destination pair with a waypoint at the
crossing midpoint, which forces the route over that bridge or tunnel.
Travel time uses duration_in_traffic when the API provides it.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional

import httpx

from commutecheck.models.entities import CrossingResult

logger = logging.getLogger("commutecheck.traffic.directions")

DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
METERS_PER_MILE = 1609.34

_LIMITS = httpx.Limits(max_connections=10, max_keepalive_connections=5)

ROUTES: Dict[str, Dict[str, str]] = {
    "gwb-into": {
        "origin": "40.8509,-73.9630",       # Fort Lee, NJ
        "destination": "40.8500,-73.9400",  # Washington Heights
        "waypoint": "40.8517,-73.9527",     # GWB midpoint
        "name": "George Washington Bridge",
    },
    "gwb-out": {
        "origin": "40.8500,-73.9400",
        "destination": "40.8509,-73.9630",
        "waypoint": "40.8517,-73.9527",
        "name": "George Washington Bridge",
    },
    "lincoln-into": {
        "origin": "40.7600,-74.0200",       # Weehawken, NJ
        "destination": "40.7580,-73.9900",  # Midtown
        "waypoint": "40.7590,-74.0020",     # Lincoln Tunnel midpoint
        "name": "Lincoln Tunnel",
    },
    "lincoln-out": {
        "origin": "40.7580,-73.9900",
        "destination": "40.7600,-74.0200",
        "waypoint": "40.7590,-74.0020",
        "name": "Lincoln Tunnel",
    },
    "holland-into": {
        "origin": "40.7280,-74.0500",       # Jersey City, NJ
        "destination": "40.7260,-74.0070",  # Canal St
        "waypoint": "40.7267,-74.0110",     # Holland Tunnel midpoint
        "name": "Holland Tunnel",
    },
    "holland-out": {
        "origin": "40.7260,-74.0070",
        "destination": "40.7280,-74.0500",
        "waypoint": "40.7267,-74.0110",
        "name": "Holland Tunnel",
    },
}


class DirectionsError(Exception):
    """The Directions API answered, but not with a usable route."""


class DirectionsClient:
    """Async client for per-crossing travel times.

    Pass ``client`` to supply a preconfigured httpx.AsyncClient (tests use a
    MockTransport); otherwise one is created lazily and owned by this object.
    """

    def __init__(
        self,
        api_key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        base_url: str = DIRECTIONS_URL,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self._timeout = httpx.Timeout(timeout, connect=min(timeout, 15.0))
        self._client = client
        self._owns_client = client is None

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                limits=_LIMITS,
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_travel_time(self, crossing_id: str) -> CrossingResult:
        """Fetch the current travel time for one crossing.

        Raises DirectionsError for API-level failures and httpx.HTTPError
        for transport or HTTP status failures. Never retries.
        """
        route = ROUTES.get(crossing_id)
        if route is None:
            raise DirectionsError(f"Unknown crossing: {crossing_id}")

        params = {
            "origin": route["origin"],
            "destination": route["destination"],
            "waypoints": route["waypoint"],
            "departure_time": "now",
            "traffic_model": "best_guess",
            "key": self.api_key or "",
        }

        response = await self._http().get(self.base_url, params=params)
        response.raise_for_status()
        data = response.json()

        status = data.get("status")
        if status != "OK":
            logger.error(
                "Directions API error for %s: %s %s",
                crossing_id, status, data.get("error_message", ""),
            )
            raise DirectionsError(f"API error: {status}")

        routes = data.get("routes") or []
        if not routes:
            raise DirectionsError("No routes found")

        legs = routes[0].get("legs") or []
        if not legs:
            raise DirectionsError("No route legs found")

        # Waypoints split the route into several legs
        total_seconds = 0
        total_meters = 0
        for leg in legs:
            duration = leg.get("duration_in_traffic") or leg["duration"]
            total_seconds += duration["value"]
            total_meters += leg["distance"]["value"]

        # Halves round up, matching ROUND() in the reading store
        minutes = int(total_seconds / 60 + 0.5)
        miles = total_meters / METERS_PER_MILE

        return CrossingResult(
            crossing_id=crossing_id,
            wait_time=minutes,
            duration_text=f"{minutes} mins",
            distance=f"{miles:.1f} mi",
            timestamp=datetime.now(),
        )

    async def _fetch_or_capture(self, crossing_id: str) -> CrossingResult:
        try:
            return await self.fetch_travel_time(crossing_id)
        except (DirectionsError, httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            message = str(e) or e.__class__.__name__
            logger.error("Failed to fetch %s: %s", crossing_id, message)
            return CrossingResult(
                crossing_id=crossing_id,
                error=message,
                timestamp=datetime.now(),
            )

    async def fetch_all_travel_times(self) -> List[CrossingResult]:
        """Fetch every crossing; one crossing failing never aborts the others."""
        return list(await asyncio.gather(
            *(self._fetch_or_capture(crossing_id) for crossing_id in ROUTES)
        ))
