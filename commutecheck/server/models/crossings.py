"""Pydantic models for crossing and history API."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel

NO_WAIT_TIME = "--"


class CrossingStatus(BaseModel):
    id: str
    name: str
    direction: str
    area: str
    icon: str
    wait_time: Union[int, str] = NO_WAIT_TIME  # "--" when the lookup failed
    status: str  # Light, Moderate, Heavy, Unknown
    status_class: str
    updated_at: datetime
    error: Optional[str] = None
    placeholder: bool = False


class HeatmapCell(BaseModel):
    day: str
    day_index: int  # 0=Monday, 6=Sunday
    hour: int  # 0-23
    avg_time: Optional[int] = None
    sample_count: int
    label: str


class HistoryResponse(BaseModel):
    hours: List[int]
    days: List[str]
    heatmap: List[HeatmapCell]
