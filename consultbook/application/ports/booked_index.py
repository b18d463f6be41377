from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date


class BookedIndexPort(ABC):
    """Already-committed (date, start time) reservations.

    The index is the source of truth for taken slots. It is queried per key and
    only grows when a booking is confirmed.
    """

    @abstractmethod
    def contains(self, day: date, start_time: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add(self, day: date, start_time: str) -> None:
        raise NotImplementedError
