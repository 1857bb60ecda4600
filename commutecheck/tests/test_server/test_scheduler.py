"""Tests for the background refresh scheduler.

Validates that run_refresh_scheduler:
- Refreshes immediately and then on every interval
- Keeps running after a failed refresh
- Handles stop_event gracefully
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from commutecheck.server.scheduler import run_refresh_scheduler


@pytest.fixture
def cache():
    mock_cache = MagicMock()
    mock_cache.refresh = AsyncMock(return_value=[])
    return mock_cache


@pytest.fixture
def stop_event():
    return asyncio.Event()


async def _stop_after(stop_event, delay):
    await asyncio.sleep(delay)
    stop_event.set()


@pytest.mark.asyncio
class TestRunRefreshScheduler:

    async def test_stops_when_stop_event_set(self, cache, stop_event):
        stop_event.set()

        await asyncio.wait_for(
            run_refresh_scheduler(cache, interval=1, stop_event=stop_event),
            timeout=3.0,
        )

        cache.refresh.assert_not_called()

    async def test_refreshes_immediately_then_on_interval(self, cache, stop_event):
        await asyncio.gather(
            run_refresh_scheduler(cache, interval=0.05, stop_event=stop_event),
            _stop_after(stop_event, 0.28),
        )

        assert cache.refresh.await_count >= 3

    async def test_skip_initial_refresh(self, cache, stop_event):
        await asyncio.gather(
            run_refresh_scheduler(cache, interval=10, stop_event=stop_event, run_immediately=False),
            _stop_after(stop_event, 0.05),
        )

        cache.refresh.assert_not_called()

    async def test_continues_after_failure(self, cache, stop_event):
        cache.refresh.side_effect = RuntimeError("API down")

        await asyncio.gather(
            run_refresh_scheduler(cache, interval=0.05, stop_event=stop_event),
            _stop_after(stop_event, 0.28),
        )

        assert cache.refresh.await_count >= 3

    async def test_failure_is_logged(self, cache, stop_event, caplog):
        cache.refresh.side_effect = RuntimeError("API down")
        stop_event_task = asyncio.create_task(_stop_after(stop_event, 0.02))

        with caplog.at_level("ERROR", logger="commutecheck.server.scheduler"):
            await run_refresh_scheduler(cache, interval=10, stop_event=stop_event)
        await stop_event_task

        assert "Initial traffic fetch failed: API down" in caplog.text
