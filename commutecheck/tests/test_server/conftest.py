"""Test fixtures for server tests.

Creates a deterministic test database with known readings and wires the app
with a fake Directions client so no network access happens.
"""

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from commutecheck.models.entities import CrossingResult
from commutecheck.models.schema import get_connection, ensure_database
from commutecheck.server.app import create_app, configure_services, open_database

ADMIN_KEY = "test-admin-key"


class FakeDirections:
    """Stands in for DirectionsClient; returns canned results."""

    def __init__(self, api_key="fake-key", results=None, error=None):
        self.api_key = api_key
        self.results = results
        self.error = error
        self.calls = 0

    def is_configured(self):
        return bool(self.api_key)

    async def fetch_all_travel_times(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.results)

    async def aclose(self):
        pass


def canned_results():
    """gwb-into fails, every other crossing has a wait time."""
    now = datetime.now()
    waits = {
        "gwb-out": 12,
        "lincoln-into": 22,
        "lincoln-out": 31,
        "holland-into": 9,
        "holland-out": 17,
    }
    results = [CrossingResult(crossing_id="gwb-into", timestamp=now, error="API error: OVER_QUERY_LIMIT")]
    results += [CrossingResult(crossing_id=cid, timestamp=now, wait_time=w) for cid, w in waits.items()]
    return results


@pytest.fixture
def test_db_path(tmp_path):
    """Create a temporary database path."""
    return tmp_path / "test_server.db"


@pytest.fixture
def populated_db(test_db_path):
    """Create and populate a test database with deterministic data."""
    conn = get_connection(test_db_path)
    ensure_database(conn)
    _populate_test_data(conn)
    conn.close()
    return test_db_path


def _populate_test_data(conn):
    """Insert deterministic readings.

    2026-02-02 is a Monday, 2026-02-08 a Sunday.
    - lincoln-into: two readings Monday 08:xx (10 and 13 -> mean 12),
      one Sunday 23:30 (30)
    - holland-out: one reading Wednesday 17:05 (25)
    - every other crossing: no readings
    """
    conn.executemany(
        "INSERT INTO readings (crossing_id, wait_time, recorded_at) VALUES (?, ?, ?)",
        [
            ("lincoln-into", 10, "2026-02-02 08:05:00"),
            ("lincoln-into", 13, "2026-02-02 08:45:00"),
            ("lincoln-into", 30, "2026-02-08 23:30:00"),
            ("holland-out", 25, "2026-02-04 17:05:00"),
        ],
    )
    conn.commit()


@pytest_asyncio.fixture
async def async_db(populated_db):
    """Open an aiosqlite connection to the populated test database."""
    db = await open_database(populated_db)
    yield db
    await db.close()


def _config(db_path, api_key):
    return {
        "database_path": str(db_path),
        "google_maps_api_key": api_key,
        "admin_api_key": ADMIN_KEY,
        "cache_ttl_seconds": 600,
        "refresh_interval_seconds": 600,
        "request_timeout_seconds": 5,
        "placeholder_min_wait": 10,
        "placeholder_max_wait": 40,
    }


@pytest.fixture
def fake_directions():
    return FakeDirections(results=canned_results())


@pytest_asyncio.fixture
async def app(populated_db, fake_directions):
    """App wired to the populated database and a configured fake client.

    The lifespan is bypassed, so no scheduler runs during tests.
    """
    config = _config(populated_db, "fake-key")
    app = create_app(config=config)

    db = await open_database(populated_db)
    configure_services(app, config, db, directions=fake_directions)
    yield app
    await db.close()


@pytest_asyncio.fixture
async def client(app):
    """Create an async test client with the populated database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def unconfigured_directions():
    return FakeDirections(api_key=None, error=AssertionError("must not fetch"))


@pytest_asyncio.fixture
async def placeholder_client(populated_db, unconfigured_directions):
    """Client for an app with no Directions API key."""
    config = _config(populated_db, None)
    app = create_app(config=config)

    db = await open_database(populated_db)
    configure_services(app, config, db, directions=unconfigured_directions)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()
