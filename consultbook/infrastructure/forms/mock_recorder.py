from __future__ import annotations

import logging

from consultbook.application.ports.booking_recorder import BookingRecorderPort
from consultbook.application.utils.booking_format import build_record_fields
from consultbook.domain.entities.booking import ConfirmedBooking


class MockBookingRecorder(BookingRecorderPort):
    def __init__(self, currency_symbol: str = "₹") -> None:
        self.records: list[dict[str, str]] = []
        self._currency_symbol = currency_symbol
        self._logger = logging.getLogger(__name__)

    async def record(self, booking: ConfirmedBooking) -> None:
        fields = build_record_fields(booking, self._currency_symbol)
        self.records.append(fields)
        self._logger.info(
            "Mock booking recorded",
            extra={"booking_ref": booking.reference, "service": fields["service"], "date": fields["date"]},
        )
