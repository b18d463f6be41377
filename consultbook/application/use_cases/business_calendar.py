from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from consultbook.application.utils.clock import overlaps, to_clock_string, to_minutes
from consultbook.domain.entities.business_day import BusinessDay

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _weekday_index(weekday: date | int) -> int:
    if isinstance(weekday, date):
        return weekday.weekday()
    if not 0 <= weekday <= 6:
        raise ValueError(f"Weekday must be 0 (Monday) .. 6 (Sunday), got {weekday}")
    return weekday


class BusinessCalendar:
    """Read-only weekly opening hours.

    Weekdays are Python weekdays (Monday = 0); a ``date`` is accepted anywhere a
    weekday is expected.
    """

    def __init__(self, days: Mapping[int, BusinessDay]) -> None:
        missing = [WEEKDAY_NAMES[i] for i in range(7) if i not in days]
        if missing:
            raise ValueError(f"Business hours missing for: {', '.join(missing)}")
        self._days = {i: days[i] for i in range(7)}

    @staticmethod
    def from_config(config: Mapping[str, Mapping[str, Any]]) -> "BusinessCalendar":
        """Build a calendar from ``{"monday": {"start": "09:00", "end": "17:00", "breaks": [["12:00", "13:00"]]}}``.

        Days that are absent or carry ``"closed": true`` are closed.
        """
        days: dict[int, BusinessDay] = {}
        for index, name in enumerate(WEEKDAY_NAMES):
            entry = config.get(name)
            if not entry or entry.get("closed"):
                days[index] = BusinessDay.closed()
                continue
            breaks = [(to_minutes(start), to_minutes(end)) for start, end in entry.get("breaks", [])]
            days[index] = BusinessDay.open(to_minutes(entry["start"]), to_minutes(entry["end"]), breaks)
        return BusinessCalendar(days)

    def hours_for(self, weekday: date | int) -> BusinessDay:
        return self._days[_weekday_index(weekday)]

    def is_legal_window(self, weekday: date | int, start_minutes: int, duration_minutes: int) -> bool:
        day = self.hours_for(weekday)
        if not day.is_open:
            return False
        end_minutes = start_minutes + duration_minutes
        if start_minutes < day.start_minutes or end_minutes > day.end_minutes:
            return False
        return not any(
            overlaps(start_minutes, end_minutes, break_start, break_end)
            for break_start, break_end in day.breaks
        )

    def closed_weekdays(self) -> list[int]:
        return [index for index, day in self._days.items() if not day.is_open]

    def describe(self) -> list[dict[str, Any]]:
        """Weekly hours as display metadata, Monday first."""
        result: list[dict[str, Any]] = []
        for index, name in enumerate(WEEKDAY_NAMES):
            day = self._days[index]
            if not day.is_open:
                result.append({"weekday": index, "name": name, "closed": True, "breaks": []})
                continue
            result.append(
                {
                    "weekday": index,
                    "name": name,
                    "closed": False,
                    "start": to_clock_string(day.start_minutes),
                    "end": _clock_or_midnight(day.end_minutes),
                    "breaks": [
                        [to_clock_string(start), _clock_or_midnight(end)] for start, end in day.breaks
                    ],
                }
            )
        return result


def _clock_or_midnight(minutes: int) -> str:
    return "24:00" if minutes == 24 * 60 else to_clock_string(minutes)
