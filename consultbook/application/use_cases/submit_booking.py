from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from consultbook.application.exceptions import SubmissionError
from consultbook.application.ports.booking_recorder import BookingRecorderPort
from consultbook.application.ports.operator_notifier import OperatorNotifierPort
from consultbook.application.utils.booking_format import format_operator_message
from consultbook.domain.entities.booking import ConfirmedBooking

SUBMISSION_FAILED_MESSAGE = "Booking submission failed. Please try again or contact us directly."


@dataclass(frozen=True)
class SubmissionOutcome:
    ok: bool
    errors: list[BaseException] = field(default_factory=list)

    @property
    def error(self) -> SubmissionError | None:
        if self.ok:
            return None
        return SubmissionError(SUBMISSION_FAILED_MESSAGE, self.errors)


class SubmitBookingUseCase:
    """Fan a confirmed booking out to the record sink and the operator channel.

    Both calls are started together and both are awaited. A failure in one does
    not cancel the other, and nothing is rolled back: a booking that was
    recorded but not notified stays recorded, so a manual retry can record it
    twice.
    """

    def __init__(
        self,
        recorder: BookingRecorderPort,
        notifier: OperatorNotifierPort,
        currency_symbol: str = "₹",
        timeout_seconds: float | None = 15.0,
    ) -> None:
        self._recorder = recorder
        self._notifier = notifier
        self._currency_symbol = currency_symbol
        self._timeout_seconds = timeout_seconds if timeout_seconds and timeout_seconds > 0 else None
        self._logger = logging.getLogger(__name__)

    async def submit(self, booking: ConfirmedBooking) -> SubmissionOutcome:
        message = format_operator_message(booking, self._currency_symbol)
        tasks = [
            asyncio.create_task(self._recorder.record(booking), name="record"),
            asyncio.create_task(self._notifier.notify(message), name="notify"),
        ]
        done, pending = await asyncio.wait(tasks, timeout=self._timeout_seconds)

        errors: list[BaseException] = []
        for task in tasks:
            if task in pending:
                # Left running: a dispatched call is never aborted.
                task.add_done_callback(self._log_late_result)
                errors.append(TimeoutError(f"{task.get_name()} did not finish within {self._timeout_seconds}s"))
                continue
            exc = task.exception()
            if exc is not None:
                errors.append(exc)

        if errors:
            self._logger.error(
                "Booking submission failed",
                extra={
                    "booking_ref": booking.reference,
                    "error": "; ".join(f"{type(e).__name__}: {e}" for e in errors),
                },
            )
            return SubmissionOutcome(ok=False, errors=errors)

        self._logger.info("Booking submitted", extra={"booking_ref": booking.reference})
        return SubmissionOutcome(ok=True)

    def _log_late_result(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.warning(
                "Late submission call failed", extra={"task": task.get_name(), "error": str(exc)}
            )
        else:
            self._logger.info("Late submission call completed", extra={"task": task.get_name()})
