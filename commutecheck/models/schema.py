"""
SQLite database schema definition, migrations, and connection management.

The readings table is an append-only log of wait-time observations. Schema
versions are tracked with PRAGMA user_version.
"""

import sqlite3
from pathlib import Path

# Current schema version - increment when adding migrations
CURRENT_SCHEMA_VERSION = 1


def get_connection(db_path: Path) -> sqlite3.Connection:
    """
    Get a database connection with proper configuration.

    Configures:
    - WAL mode so the server's async connection can read while the CLI writes
    - NORMAL synchronous for balance of safety/speed
    - Row factory for dict-like access
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.execute("PRAGMA temp_store=MEMORY")
    conn.execute("PRAGMA busy_timeout=5000")

    return conn


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Get current schema version from PRAGMA user_version."""
    cursor = conn.execute("PRAGMA user_version")
    return cursor.fetchone()[0]


def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set schema version using PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {version}")


def ensure_database(conn: sqlite3.Connection) -> None:
    """
    Ensure database has correct schema, running migrations if needed.

    Creates the readings table and its indexes if they don't exist.
    """
    current_version = get_schema_version(conn)

    if current_version < 1:
        _create_initial_schema(conn)
        set_schema_version(conn, 1)
        conn.commit()


def _create_initial_schema(conn: sqlite3.Connection) -> None:
    """Create the initial schema (version 1)."""

    # recorded_at holds local wall-clock time, not UTC
    conn.execute("""
        CREATE TABLE IF NOT EXISTS readings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            crossing_id TEXT NOT NULL,
            wait_time INTEGER NOT NULL,
            recorded_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """)

    _create_indexes(conn)


def _create_indexes(conn: sqlite3.Connection) -> None:
    """Create indexes used by the heatmap and latest-reading queries."""
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_readings_crossing
        ON readings(crossing_id)
    """)
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_readings_time
        ON readings(recorded_at)
    """)


def drop_all_tables(conn: sqlite3.Connection) -> None:
    """Drop all tables (for testing or rebuild)."""
    conn.execute("DROP TABLE IF EXISTS readings")
    set_schema_version(conn, 0)
    conn.commit()
