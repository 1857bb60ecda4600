"""Traffic package - directions lookups, placeholder data and the refresh cache."""

from .directions import DirectionsClient, DirectionsError, ROUTES
from .cache import TrafficCache, TrafficCacheState
from .placeholder import build_placeholder_results

__all__ = [
    "DirectionsClient",
    "DirectionsError",
    "ROUTES",
    "TrafficCache",
    "TrafficCacheState",
    "build_placeholder_results",
]
