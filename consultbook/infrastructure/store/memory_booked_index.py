from __future__ import annotations

import threading
from datetime import date
from typing import Iterable

from consultbook.application.ports.booked_index import BookedIndexPort
from consultbook.domain.entities.slot import slot_key


class MemoryBookedIndex(BookedIndexPort):
    def __init__(self, keys: Iterable[tuple[date, str]] | None = None) -> None:
        self._keys: set[str] = {slot_key(day, start_time) for day, start_time in (keys or [])}
        self._lock = threading.Lock()

    def contains(self, day: date, start_time: str) -> bool:
        with self._lock:
            return slot_key(day, start_time) in self._keys

    def add(self, day: date, start_time: str) -> None:
        with self._lock:
            self._keys.add(slot_key(day, start_time))
