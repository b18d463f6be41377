from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from consultbook.application.use_cases.booking_flow import BookingFlow


class BookingSessionStorePort(ABC):
    @abstractmethod
    def create(self, flow: "BookingFlow") -> str:
        """Store a new flow and return its session id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> "BookingFlow | None":
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> None:
        raise NotImplementedError
