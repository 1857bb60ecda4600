"""Reading store queries.

Readings are append-only. recorded_at is stored as local wall-clock text
(YYYY-MM-DD HH:MM:SS) so SQLite's strftime buckets by the local hour
without any timezone modifier.
"""

from datetime import datetime
from typing import List, Optional

import aiosqlite

from commutecheck.models.entities import Reading

LOCAL_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_local_timestamp(timestamp: datetime) -> str:
    """Render a timestamp as local calendar fields, never UTC-normalized."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone().replace(tzinfo=None)
    return timestamp.strftime(LOCAL_TIMESTAMP_FORMAT)


async def add_reading(
    db: aiosqlite.Connection,
    crossing_id: str,
    wait_time: int,
    timestamp: Optional[datetime] = None,
) -> int:
    """Append a reading and return its row id.

    No validation happens here; callers check the crossing id and range.
    """
    recorded_at = format_local_timestamp(timestamp or datetime.now())
    cursor = await db.execute(
        """
        INSERT INTO readings (crossing_id, wait_time, recorded_at)
        VALUES (?, ?, ?)
        """,
        (crossing_id, wait_time, recorded_at),
    )
    await db.commit()
    return cursor.lastrowid


async def get_day_hour_aggregate(
    db: aiosqlite.Connection,
    crossing_id: str,
) -> List[dict]:
    """Average wait time grouped by day-of-week and hour.

    day_of_week follows SQLite storage order: 0=Sunday .. 6=Saturday.
    Only buckets that have readings are returned.
    """
    cursor = await db.execute(
        """
        SELECT
            CAST(strftime('%w', recorded_at) AS INTEGER) as day_of_week,
            CAST(strftime('%H', recorded_at) AS INTEGER) as hour,
            ROUND(AVG(wait_time)) as avg_time,
            COUNT(*) as sample_count
        FROM readings
        WHERE crossing_id = ?
        GROUP BY day_of_week, hour
        ORDER BY day_of_week, hour
        """,
        (crossing_id,),
    )
    rows = await cursor.fetchall()

    return [
        {
            "day_of_week": row[0],
            "hour": row[1],
            "avg_time": int(row[2]),
            "sample_count": row[3],
        }
        for row in rows
    ]


async def get_latest(db: aiosqlite.Connection, crossing_id: str) -> Optional[Reading]:
    """Most recent reading for a crossing, or None."""
    cursor = await db.execute(
        """
        SELECT wait_time, recorded_at
        FROM readings
        WHERE crossing_id = ?
        ORDER BY recorded_at DESC, id DESC
        LIMIT 1
        """,
        (crossing_id,),
    )
    row = await cursor.fetchone()
    if row is None:
        return None
    return Reading(
        crossing_id=crossing_id,
        wait_time=row[0],
        recorded_at=datetime.fromisoformat(row[1]),
    )


async def get_count(db: aiosqlite.Connection, crossing_id: str) -> int:
    """Number of readings stored for a crossing."""
    cursor = await db.execute(
        "SELECT COUNT(*) FROM readings WHERE crossing_id = ?",
        (crossing_id,),
    )
    row = await cursor.fetchone()
    return row[0]
