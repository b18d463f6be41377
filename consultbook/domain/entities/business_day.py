from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BusinessDay:
    """Opening hours for one weekday, as minute offsets from midnight.

    A closed day has no window and no breaks. Breaks are ordered, non-overlapping
    (start, end) pairs inside the open window.
    """

    is_open: bool = False
    start_minutes: int | None = None
    end_minutes: int | None = None
    breaks: tuple[tuple[int, int], ...] = ()

    @staticmethod
    def closed() -> "BusinessDay":
        return BusinessDay()

    @staticmethod
    def open(start_minutes: int, end_minutes: int, breaks: list[tuple[int, int]] | None = None) -> "BusinessDay":
        if start_minutes >= end_minutes:
            raise ValueError(f"Opening time must precede closing time: {start_minutes} >= {end_minutes}")
        ordered = tuple(sorted((int(s), int(e)) for s, e in (breaks or [])))
        previous_end = start_minutes
        for break_start, break_end in ordered:
            if break_start >= break_end:
                raise ValueError(f"Empty or inverted break: {break_start}-{break_end}")
            if break_start < previous_end or break_end > end_minutes:
                raise ValueError(f"Break {break_start}-{break_end} overlaps another break or leaves open hours")
            previous_end = break_end
        return BusinessDay(
            is_open=True,
            start_minutes=start_minutes,
            end_minutes=end_minutes,
            breaks=ordered,
        )
