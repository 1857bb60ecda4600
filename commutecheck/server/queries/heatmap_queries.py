"""Heatmap query module."""

from typing import List

import aiosqlite

from commutecheck.server.queries.reading_queries import get_day_hour_aggregate

DAY_NAMES: List[str] = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
HOURS: List[int] = list(range(24))


def hour_label(hour: int) -> str:
    """12-hour clock label, e.g. 0 -> '12am', 13 -> '1pm'."""
    display_hour = 12 if hour % 12 == 0 else hour % 12
    ampm = "pm" if hour >= 12 else "am"
    return f"{display_hour}{ampm}"


def build_heatmap(rows: List[dict]) -> List[dict]:
    """Expand raw aggregate rows into the full Monday-first 7x24 grid.

    Raw rows use SQLite dow (0=Sunday). Display index is 0=Monday .. 6=Sunday.
    Buckets without readings get avg_time None and sample_count 0.
    """
    by_key = {}
    for row in rows:
        day_index = (row["day_of_week"] - 1) % 7
        by_key[(day_index, row["hour"])] = row

    heatmap = []
    for day_index, day in enumerate(DAY_NAMES):
        for hour in HOURS:
            row = by_key.get((day_index, hour))
            heatmap.append({
                "day": day,
                "day_index": day_index,
                "hour": hour,
                "avg_time": row["avg_time"] if row else None,
                "sample_count": row["sample_count"] if row else 0,
                "label": hour_label(hour),
            })
    return heatmap


async def get_historical_data(db: aiosqlite.Connection, crossing_id: str) -> dict:
    """Get heatmap data for one crossing grouped by day-of-week and hour."""
    rows = await get_day_hour_aggregate(db, crossing_id)
    return {
        "hours": HOURS,
        "days": DAY_NAMES,
        "heatmap": build_heatmap(rows),
    }
