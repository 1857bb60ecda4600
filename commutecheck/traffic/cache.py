"""
Traffic cache with single-flight refresh.

One cache entry holds the latest results for every crossing. Readers get
cached data while it is younger than the TTL; otherwise they start a refresh
or, if one is already running, await that same refresh. The in-flight task
is the only marker: there is never more than one batch of Directions calls
running, whether it was started by a request or by the scheduler.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

import aiosqlite

from commutecheck.models.entities import CrossingResult
from commutecheck.server.queries.reading_queries import add_reading

logger = logging.getLogger("commutecheck.traffic.cache")

DEFAULT_TTL_SECONDS = 600

FetchAll = Callable[[], Awaitable[List[CrossingResult]]]


def _retrieve_exception(task: "asyncio.Task") -> None:
    # Marks a failure as seen when every waiter was cancelled before it landed
    if not task.cancelled():
        task.exception()


@dataclass
class TrafficCacheState:
    """Mutable cache entry. Only TrafficCache writes to it."""
    data: Optional[List[CrossingResult]] = None
    last_updated: Optional[datetime] = None
    refresh_task: Optional["asyncio.Task[List[CrossingResult]]"] = None


class TrafficCache:
    """Coordinates reads and refreshes of the shared traffic cache entry."""

    def __init__(
        self,
        fetch_all: FetchAll,
        db: aiosqlite.Connection,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        state: Optional[TrafficCacheState] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._fetch_all = fetch_all
        self._db = db
        self.ttl_seconds = ttl_seconds
        self._state = state if state is not None else TrafficCacheState()
        self._clock = clock

    @property
    def state(self) -> TrafficCacheState:
        return self._state

    @property
    def data(self) -> Optional[List[CrossingResult]]:
        return self._state.data

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._state.last_updated

    @property
    def refreshing(self) -> bool:
        return self._state.refresh_task is not None

    def _age(self) -> Optional[float]:
        if self._state.last_updated is None:
            return None
        return (self._clock() - self._state.last_updated).total_seconds()

    def cache_age_seconds(self) -> Optional[int]:
        """Whole seconds since the last successful refresh, or None."""
        age = self._age()
        return None if age is None else round(age)

    def is_fresh(self) -> bool:
        age = self._age()
        return self._state.data is not None and age is not None and age < self.ttl_seconds

    async def get_current_data(self) -> List[CrossingResult]:
        """Cached results if fresh, otherwise the result of a (shared) refresh."""
        if self.is_fresh():
            return self._state.data
        return await self.refresh()

    async def refresh(self) -> List[CrossingResult]:
        """Start a refresh, or join the one already in flight.

        Waiters are shielded: cancelling one caller does not cancel the
        refresh the other callers are waiting on.
        """
        task = self._state.refresh_task
        if task is None:
            task = asyncio.create_task(self._refresh())
            task.add_done_callback(_retrieve_exception)
            self._state.refresh_task = task
        return await asyncio.shield(task)

    async def _refresh(self) -> List[CrossingResult]:
        logger.info("Fetching fresh traffic data from Google Maps...")
        started = time.monotonic()
        try:
            results = await self._fetch_all()

            for result in results:
                if result.ok:
                    await add_reading(self._db, result.crossing_id, result.wait_time, result.timestamp)

            self._state.data = results
            self._state.last_updated = self._clock()
        except Exception:
            logger.exception("Failed to fetch traffic data")
            raise
        finally:
            self._state.refresh_task = None

        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "Traffic data updated in %.1fs (%d crossings, %d failed)",
            time.monotonic() - started, len(results), failed,
        )
        return results
