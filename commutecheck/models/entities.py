"""
Data structures (entities) for Commute Check.

Uses dataclasses for clean, typed data structures.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Crossing:
    """Static metadata for one directional crossing."""
    id: str
    name: str
    direction: str  # 'Into Manhattan' or 'Out of Manhattan'
    area: str
    icon: str


@dataclass(frozen=True)
class Reading:
    """A single persisted wait-time observation."""
    crossing_id: str
    wait_time: int
    recorded_at: datetime  # local wall-clock time


@dataclass
class CrossingResult:
    """Outcome of looking up the current wait time for one crossing.

    A failed lookup keeps wait_time as None and carries the error message,
    so failures travel through the same channel as successes.
    """
    crossing_id: str
    timestamp: datetime
    wait_time: Optional[int] = None
    error: Optional[str] = None
    duration_text: Optional[str] = None
    distance: Optional[str] = None
    placeholder: bool = False

    @property
    def ok(self) -> bool:
        return self.wait_time is not None
