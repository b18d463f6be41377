from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from consultbook.application.utils.clock import to_clock_string


def slot_key(day: date, start_time: str) -> str:
    """Booked-index key for a start time on a day, e.g. "2024-03-04-10:30"."""
    return f"{day.isoformat()}-{start_time}"


@dataclass(frozen=True, order=True)
class Slot:
    # Equality is (date, start); duration describes the candidate only.
    date: date
    start_minutes: int
    duration_minutes: int = field(compare=False)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes

    @property
    def start_time(self) -> str:
        return to_clock_string(self.start_minutes)

    @property
    def end_time(self) -> str:
        # A window may end exactly at midnight.
        if self.end_minutes == 24 * 60:
            return "24:00"
        return to_clock_string(self.end_minutes)

    @property
    def key(self) -> str:
        return slot_key(self.date, self.start_time)
