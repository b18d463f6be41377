from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from consultbook.application.ports.booked_index import BookedIndexPort
from consultbook.application.use_cases.business_calendar import BusinessCalendar
from consultbook.application.utils.clock import to_clock_string
from consultbook.domain.entities.slot import Slot


def compute_slots(
    day: date,
    duration_minutes: int,
    step_minutes: int,
    booked_index: BookedIndexPort,
    calendar: BusinessCalendar,
) -> list[Slot]:
    """Bookable start times for ``day``, earliest first.

    Candidates run from opening time to ``closing - duration`` on a
    ``step_minutes`` grid, independent of the service duration. A candidate is
    dropped when its window crosses a break or closing time, or when its start
    is already in the booked index. A closed day yields an empty list.
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")
    if step_minutes <= 0:
        raise ValueError(f"step_minutes must be positive, got {step_minutes}")

    hours = calendar.hours_for(day)
    if not hours.is_open:
        return []

    slots: list[Slot] = []
    last_start = hours.end_minutes - duration_minutes
    for start in range(hours.start_minutes, last_start + 1, step_minutes):
        if not calendar.is_legal_window(day, start, duration_minutes):
            continue
        if booked_index.contains(day, to_clock_string(start)):
            continue
        slots.append(Slot(date=day, start_minutes=start, duration_minutes=duration_minutes))
    return slots


@dataclass(frozen=True)
class DayAvailability:
    date: date
    duration_minutes: int
    closed: bool
    slots: list[Slot]

    @property
    def fully_booked(self) -> bool:
        return not self.closed and not self.slots

    def has_start(self, start_time: str) -> bool:
        return any(slot.start_time == start_time for slot in self.slots)


class AvailabilityService:
    def __init__(
        self,
        calendar: BusinessCalendar,
        booked_index: BookedIndexPort,
        step_minutes: int = 30,
    ) -> None:
        self._calendar = calendar
        self._booked_index = booked_index
        self._step_minutes = step_minutes
        self._logger = logging.getLogger(__name__)

    @property
    def calendar(self) -> BusinessCalendar:
        return self._calendar

    @property
    def booked_index(self) -> BookedIndexPort:
        return self._booked_index

    def day_availability(self, day: date, duration_minutes: int) -> DayAvailability:
        closed = not self._calendar.hours_for(day).is_open
        slots = compute_slots(day, duration_minutes, self._step_minutes, self._booked_index, self._calendar)
        self._logger.debug(
            "Computed availability",
            extra={"date": day.isoformat(), "duration": duration_minutes, "slot_count": len(slots)},
        )
        return DayAvailability(date=day, duration_minutes=duration_minutes, closed=closed, slots=slots)
