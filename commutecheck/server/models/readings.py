"""Pydantic models for manual reading submission and refresh."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ReadingCreateRequest(BaseModel):
    crossing_id: str
    wait_time: int


class ReadingCreateResponse(BaseModel):
    success: bool
    id: int


class RefreshResponse(BaseModel):
    success: bool
    updated_at: Optional[datetime] = None
