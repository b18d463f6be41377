from __future__ import annotations

import threading

from consultbook.application.ports.session_store import BookingSessionStorePort
from consultbook.application.use_cases.booking_flow import BookingFlow


class MemoryBookingSessionStore(BookingSessionStorePort):
    def __init__(self, max_sessions: int = 1000) -> None:
        self._flows: dict[str, BookingFlow] = {}
        self._max_sessions = max_sessions
        self._lock = threading.Lock()

    def create(self, flow: BookingFlow) -> str:
        session_id = flow.session.session_id
        with self._lock:
            self._flows[session_id] = flow
            if len(self._flows) > self._max_sessions:
                # Oldest sessions go first; dicts keep insertion order.
                for stale_id in list(self._flows)[: len(self._flows) - self._max_sessions]:
                    del self._flows[stale_id]
        return session_id

    def get(self, session_id: str) -> BookingFlow | None:
        with self._lock:
            return self._flows.get(session_id)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._flows.pop(session_id, None)
