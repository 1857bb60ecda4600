"""Synthesized wait times for running without a Directions API key."""

import random
from datetime import datetime
from typing import List, Optional

from commutecheck.models.crossings import CROSSING_IDS
from commutecheck.models.entities import CrossingResult


def build_placeholder_results(
    min_wait: int = 10,
    max_wait: int = 40,
    rng: Optional[random.Random] = None,
) -> List[CrossingResult]:
    """One placeholder result per crossing, wait time uniform in [min_wait, max_wait].

    Results are tagged ``placeholder=True`` and are never persisted.
    """
    rng = rng or random.Random()
    now = datetime.now()
    return [
        CrossingResult(
            crossing_id=crossing_id,
            wait_time=rng.randint(min_wait, max_wait),
            timestamp=now,
            placeholder=True,
        )
        for crossing_id in CROSSING_IDS
    ]
