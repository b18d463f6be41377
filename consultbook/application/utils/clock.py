from __future__ import annotations

import re
from datetime import date

from consultbook.application.exceptions import ClockRangeError, ParseError

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"([0-9]{2}):([0-9]{2})")


def to_minutes(clock: str) -> int:
    """Parse a 24-hour "HH:MM" string into minutes since midnight."""
    match = _CLOCK_RE.fullmatch(clock or "")
    if not match:
        raise ParseError(f"Invalid clock string: {clock!r}. Expected HH:MM.")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23:
        raise ParseError(f"Invalid hour in {clock!r}: {hours}")
    if minutes > 59:
        raise ParseError(f"Invalid minute in {clock!r}: {minutes}")
    return hours * 60 + minutes


def to_clock_string(minutes: int) -> str:
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ClockRangeError(f"Minute offset out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    # Half-open intervals: touching ends do not overlap.
    return a_start < b_end and a_end > b_start


def format_time_12h(clock: str) -> str:
    """Render "14:30" as "2:30 PM"."""
    total = to_minutes(clock)
    hours, minutes = divmod(total, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours - 12 if hours > 12 else (12 if hours == 0 else hours)
    return f"{display_hours}:{minutes:02d} {period}"


def format_long_date(value: date) -> str:
    """Render a date as "Monday, March 4, 2024"."""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def format_short_date(value: date) -> str:
    """Render a date as dd/mm/yyyy."""
    return value.strftime("%d/%m/%Y")
