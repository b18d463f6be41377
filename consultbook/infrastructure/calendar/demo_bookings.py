from __future__ import annotations

import logging
import random
from datetime import date, timedelta

from consultbook.application.ports.booked_index import BookedIndexPort

logger = logging.getLogger(__name__)


def seed_booked_slots(index: BookedIndexPort, start: date, days: int = 30, seed: int = 7) -> int:
    """Mark a few random slots as taken so demo calendars are not empty.

    Roughly three days in ten get one booking between 09:00 and 16:30. The
    random source is seeded, so the same inputs always seed the same slots.
    """
    rng = random.Random(seed)
    added = 0
    for offset in range(days):
        if rng.random() <= 0.7:
            continue
        hour = 9 + rng.randrange(8)
        minute = 0 if rng.random() > 0.5 else 30
        index.add(start + timedelta(days=offset), f"{hour:02d}:{minute:02d}")
        added += 1
    logger.info("Seeded demo bookings", extra={"reason": f"{added} slots over {days} days"})
    return added
