"""The six monitored crossings and wait-time status classification."""

from typing import Dict, List, Optional, Tuple

from .entities import Crossing

CROSSINGS: List[Crossing] = [
    Crossing(
        id="gwb-into",
        name="George Washington Bridge",
        direction="Into Manhattan",
        area="Upper Manhattan",
        icon="\U0001F309",
    ),
    Crossing(
        id="gwb-out",
        name="George Washington Bridge",
        direction="Out of Manhattan",
        area="To New Jersey",
        icon="\U0001F309",
    ),
    Crossing(
        id="lincoln-into",
        name="Lincoln Tunnel",
        direction="Into Manhattan",
        area="Midtown",
        icon="\U0001F687",
    ),
    Crossing(
        id="lincoln-out",
        name="Lincoln Tunnel",
        direction="Out of Manhattan",
        area="To New Jersey",
        icon="\U0001F687",
    ),
    Crossing(
        id="holland-into",
        name="Holland Tunnel",
        direction="Into Manhattan",
        area="Lower Manhattan",
        icon="\U0001F697",
    ),
    Crossing(
        id="holland-out",
        name="Holland Tunnel",
        direction="Out of Manhattan",
        area="To New Jersey",
        icon="\U0001F697",
    ),
]

CROSSINGS_BY_ID: Dict[str, Crossing] = {c.id: c for c in CROSSINGS}
CROSSING_IDS: List[str] = [c.id for c in CROSSINGS]

# Manual readings outside this range are rejected
MIN_WAIT_TIME = 0
MAX_WAIT_TIME = 300

LIGHT_MAX_MINUTES = 15
MODERATE_MAX_MINUTES = 25


def get_crossing(crossing_id: str) -> Optional[Crossing]:
    """Look up crossing metadata by id."""
    return CROSSINGS_BY_ID.get(crossing_id)


def is_known_crossing(crossing_id: str) -> bool:
    return crossing_id in CROSSINGS_BY_ID


def get_status(wait_time: Optional[int]) -> Tuple[str, str]:
    """Classify a wait time into (status, status_class)."""
    if wait_time is None:
        return "Unknown", "unknown"
    if wait_time <= LIGHT_MAX_MINUTES:
        return "Light", "good"
    if wait_time <= MODERATE_MAX_MINUTES:
        return "Moderate", "moderate"
    return "Heavy", "heavy"


def validate_reading(crossing_id: str, wait_time: int) -> None:
    """Reject manual readings for unknown crossings or out-of-range wait times.

    Raises ValueError with a user-facing message.
    """
    if not is_known_crossing(crossing_id):
        raise ValueError("Invalid crossing_id")
    if isinstance(wait_time, bool) or not isinstance(wait_time, int):
        raise ValueError("wait_time must be an integer")
    if wait_time < MIN_WAIT_TIME or wait_time > MAX_WAIT_TIME:
        raise ValueError(
            f"wait_time must be an integer between {MIN_WAIT_TIME} and {MAX_WAIT_TIME} minutes"
        )
