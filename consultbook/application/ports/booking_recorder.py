from __future__ import annotations

from abc import ABC, abstractmethod

from consultbook.domain.entities.booking import ConfirmedBooking


class BookingRecorderPort(ABC):
    @abstractmethod
    async def record(self, booking: ConfirmedBooking) -> None:
        """Durably record a confirmed booking. Raises on failure."""
        raise NotImplementedError
