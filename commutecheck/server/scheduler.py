"""
Background refresh scheduler.

Triggers TrafficCache.refresh() on a fixed interval, independent of read
traffic. Uses the same in-flight task as the read path, so a tick that
lands during a request-triggered refresh joins it instead of fetching again.
"""

import asyncio
import logging
from typing import Optional

from commutecheck.traffic.cache import TrafficCache

logger = logging.getLogger("commutecheck.server.scheduler")


async def _refresh_logged(cache: TrafficCache, label: str) -> None:
    try:
        await cache.refresh()
    except Exception as e:
        # Keep the loop alive; stale data stays in the cache
        logger.error("%s traffic fetch failed: %s", label, e)


async def run_refresh_scheduler(
    cache: TrafficCache,
    interval: float = 600,
    stop_event: Optional[asyncio.Event] = None,
    run_immediately: bool = True,
):
    """
    Refresh the traffic cache every `interval` seconds until stopped.

    Args:
        cache: Traffic cache to refresh
        interval: Seconds between refreshes
        stop_event: Event to signal shutdown
        run_immediately: Refresh once at startup so the cache is warm
    """
    stop = stop_event or asyncio.Event()

    if run_immediately and not stop.is_set():
        await _refresh_logged(cache, "Initial")

    while not stop.is_set():
        try:
            await asyncio.wait_for(stop.wait(), timeout=interval)
            break  # stop was set
        except asyncio.TimeoutError:
            pass

        await _refresh_logged(cache, "Scheduled")
