"""Models package - database schema, entities, and crossing metadata."""

from .schema import get_connection, ensure_database, get_schema_version
from .entities import Crossing, Reading, CrossingResult
from .crossings import (
    CROSSINGS,
    CROSSING_IDS,
    get_crossing,
    is_known_crossing,
    get_status,
    validate_reading,
)

__all__ = [
    "get_connection",
    "ensure_database",
    "get_schema_version",
    "Crossing",
    "Reading",
    "CrossingResult",
    "CROSSINGS",
    "CROSSING_IDS",
    "get_crossing",
    "is_known_crossing",
    "get_status",
    "validate_reading",
]
