from __future__ import annotations

import logging

import httpx

from consultbook.application.ports.booking_recorder import BookingRecorderPort
from consultbook.application.utils.booking_format import build_record_fields
from consultbook.domain.entities.booking import ConfirmedBooking

# Entry ids of the booking response form, keyed by record field.
DEFAULT_ENTRY_IDS = {
    "service": "entry.2005620554",
    "date": "entry.1045781291",
    "time": "entry.1065046570",
    "duration": "entry.1166974658",
    "price": "entry.839337160",
    "client_name": "entry.523327575",
    "email": "entry.1996042048",
    "phone": "entry.45019109",
    "project_type": "entry.1444915736",
    "budget": "entry.1330418491",
    "timeline": "entry.1168732581",
    "message": "entry.1552771188",
    "timestamp": "entry.419421918",
}


class GoogleFormRecorder(BookingRecorderPort):
    def __init__(
        self,
        form_url: str,
        entry_ids: dict[str, str] | None = None,
        currency_symbol: str = "₹",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not form_url:
            raise ValueError("GOOGLE_FORM_URL is required for the Google Form recorder")
        self._form_url = form_url
        self._entry_ids = dict(entry_ids or DEFAULT_ENTRY_IDS)
        self._currency_symbol = currency_symbol
        self._client = client or httpx.AsyncClient(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    async def record(self, booking: ConfirmedBooking) -> None:
        fields = build_record_fields(booking, self._currency_symbol)
        form_data = {
            self._entry_ids[name]: value for name, value in fields.items() if name in self._entry_ids
        }
        try:
            response = await self._client.post(self._form_url, data=form_data)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error(
                "Booking record failed",
                extra={"booking_ref": booking.reference, "error": str(e)},
            )
            raise
        self._logger.info(
            "Booking recorded",
            extra={"booking_ref": booking.reference, "status": response.status_code},
        )
