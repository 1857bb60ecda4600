"""Pydantic models for stats API."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CrossingStats(BaseModel):
    id: str
    name: str
    direction: str
    reading_count: int
    latest_wait_time: Optional[int] = None
    latest_recorded_at: Optional[datetime] = None


class StatsResponse(BaseModel):
    crossings: List[CrossingStats]
    api_configured: bool
    cache_age: Optional[int] = None  # seconds since last refresh
