from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Callable
from zoneinfo import ZoneInfo

from consultbook.application.exceptions import FlowStateError, ServiceNotFoundError, SubmissionError, ValidationError
from consultbook.application.ports.service_catalog import ServiceCatalogPort
from consultbook.application.use_cases.availability import AvailabilityService, DayAvailability
from consultbook.application.use_cases.submit_booking import SUBMISSION_FAILED_MESSAGE, SubmitBookingUseCase
from consultbook.application.use_cases.validate_customer import validate_customer
from consultbook.application.utils.booking_format import build_summary
from consultbook.domain.entities.booking import BookingAggregate, ConfirmedBooking, CustomerDetails
from consultbook.domain.entities.flow_step import FlowStep, OutcomeLevel


@dataclass(frozen=True)
class FlowOutcome:
    level: OutcomeLevel
    message: str
    error: SubmissionError | None = None


@dataclass
class BookingSession:
    """Everything one visitor's booking flow owns."""

    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    step: FlowStep = FlowStep.service_selection
    aggregate: BookingAggregate = field(default_factory=BookingAggregate)
    confirmed: ConfirmedBooking | None = None
    history: list[FlowStep] = field(default_factory=lambda: [FlowStep.service_selection])
    last_outcome: FlowOutcome | None = None


_BACK_TARGETS = {
    FlowStep.date_time_selection: FlowStep.service_selection,
    FlowStep.customer_info: FlowStep.date_time_selection,
    FlowStep.confirmation: FlowStep.customer_info,
}


class BookingFlow:
    """Step-by-step booking state machine.

    Steps: service_selection -> date_time_selection -> customer_info ->
    confirmation -> submitting -> success, with failed handing control back to
    confirmation. Each command checks the current step and the data the step
    needs before moving on; a command issued in the wrong step raises
    FlowStateError.

    The booked index only grows when both collaborators accept the booking, so
    an abandoned or failed flow never holds a slot.
    """

    def __init__(
        self,
        catalog: ServiceCatalogPort,
        availability: AvailabilityService,
        submitter: SubmitBookingUseCase,
        timezone: ZoneInfo,
        horizon_days: int = 90,
        currency_symbol: str = "₹",
        clock: Callable[[], datetime] | None = None,
        session: BookingSession | None = None,
    ) -> None:
        self._catalog = catalog
        self._availability = availability
        self._submitter = submitter
        self._timezone = timezone
        self._horizon_days = horizon_days
        self._currency_symbol = currency_symbol
        self._clock = clock or (lambda: datetime.now(timezone))
        self.session = session or BookingSession()
        self._logger = logging.getLogger(__name__)

    @property
    def step(self) -> FlowStep:
        return self.session.step

    # Step 1: service

    def select_service(self, service_key: str) -> None:
        self._require(FlowStep.service_selection)
        entry = self._catalog.get_service(service_key)
        if entry is None:
            raise ServiceNotFoundError(f"Unknown service: {service_key}")
        self.session.aggregate.apply_service(entry)
        self._logger.info(
            "Service selected", extra={"session_id": self.session.session_id, "service": entry.service_key}
        )

    def continue_to_schedule(self) -> None:
        self._require(FlowStep.service_selection)
        if not self.session.aggregate.service_key:
            raise ValidationError({"service": "Please select a service."})
        self._move_to(FlowStep.date_time_selection)

    # Step 2: date and time

    def select_date(self, day: date) -> DayAvailability:
        self._require(FlowStep.date_time_selection)
        self._check_bookable_date(day)
        aggregate = self.session.aggregate
        aggregate.date = day
        aggregate.start_time = None
        availability = self._current_availability()
        self._logger.info(
            "Date selected",
            extra={
                "session_id": self.session.session_id,
                "date": day.isoformat(),
                "reason": "closed" if availability.closed else f"{len(availability.slots)} slots",
            },
        )
        return availability

    def available_slots(self) -> DayAvailability:
        self._require(FlowStep.date_time_selection)
        if self.session.aggregate.date is None:
            raise ValidationError({"date": "Please select a date."})
        return self._current_availability()

    def select_slot(self, start_time: str) -> None:
        self._require(FlowStep.date_time_selection)
        aggregate = self.session.aggregate
        if aggregate.date is None:
            raise ValidationError({"date": "Please select a date."})
        availability = self._current_availability()
        if availability.closed:
            raise ValidationError({"date": "Office is closed on this day."})
        if not availability.has_start(start_time):
            raise ValidationError({"time": "This time slot is not available."})
        aggregate.start_time = start_time
        self._logger.info(
            "Time selected",
            extra={"session_id": self.session.session_id, "date": aggregate.date.isoformat(), "time": start_time},
        )

    def continue_to_customer_info(self) -> None:
        self._require(FlowStep.date_time_selection)
        aggregate = self.session.aggregate
        if aggregate.date is None or aggregate.start_time is None:
            raise ValidationError({"time": "Please select a date and time."})
        self._move_to(FlowStep.customer_info)

    # Step 3: customer details

    def submit_customer_info(self, payload: dict[str, Any] | CustomerDetails) -> dict[str, str]:
        """Validate and store customer details.

        Returns per-field errors; the flow only advances when there are none.
        """
        self._require(FlowStep.customer_info)
        customer = payload if isinstance(payload, CustomerDetails) else CustomerDetails.from_payload(payload)
        errors = validate_customer(customer)
        if errors:
            self._logger.info(
                "Customer details rejected",
                extra={"session_id": self.session.session_id, "reason": ",".join(sorted(errors))},
            )
            return errors
        self.session.aggregate.customer = customer
        self._move_to(FlowStep.confirmation)
        return {}

    # Step 4: confirmation

    def summary(self) -> dict[str, str]:
        if self.session.step not in (FlowStep.confirmation, FlowStep.success):
            raise FlowStateError(f"No summary available in step {self.session.step.value}")
        return build_summary(self.session.aggregate, self._currency_symbol)

    async def confirm(self) -> FlowOutcome:
        session = self.session
        if session.step is FlowStep.submitting:
            return self._finish(FlowOutcome(OutcomeLevel.warning, "Your booking is already being submitted."))
        self._require(FlowStep.confirmation)

        aggregate = session.aggregate
        if self._availability.booked_index.contains(aggregate.date, aggregate.start_time):
            aggregate.start_time = None
            session.confirmed = None
            self._move_to(FlowStep.date_time_selection)
            return self._finish(
                FlowOutcome(OutcomeLevel.error, "Sorry, that time slot was just booked. Please choose another time.")
            )

        if session.confirmed is None:
            session.confirmed = ConfirmedBooking.from_aggregate(
                aggregate,
                reference=f"BK-{uuid.uuid4().hex[:8].upper()}",
                submitted_at=self._clock(),
            )
        confirmed = session.confirmed

        self._move_to(FlowStep.submitting)
        try:
            error = (await self._submitter.submit(confirmed)).error
        except Exception as e:
            self._logger.exception("Submission raised", extra={"session_id": session.session_id})
            error = SubmissionError(SUBMISSION_FAILED_MESSAGE, [e])
        except BaseException:
            # Cancelled mid-flight; leave the session retryable.
            self._move_to(FlowStep.confirmation)
            raise

        if error is not None:
            self._move_to(FlowStep.failed)
            self._move_to(FlowStep.confirmation)
            return self._finish(
                FlowOutcome(
                    OutcomeLevel.error,
                    "Sorry, there was an error confirming your booking. Please try again.",
                    error=error,
                )
            )

        # Both collaborators already hold the booking, so it stands even if
        # the slot cannot be marked as taken here.
        self._move_to(FlowStep.success)
        try:
            self._availability.booked_index.add(confirmed.date, confirmed.start_time)
        except Exception as e:
            self._logger.exception(
                "Booked index update failed",
                extra={"session_id": session.session_id, "booking_ref": confirmed.reference},
            )
            return self._finish(
                FlowOutcome(
                    OutcomeLevel.warning,
                    f"Your appointment is confirmed ({confirmed.reference}). "
                    "Our team will contact you to double-check the time.",
                    error=SubmissionError("Booked index update failed", [e]),
                )
            )
        return self._finish(FlowOutcome(OutcomeLevel.success, f"Your appointment is confirmed ({confirmed.reference})."))

    # Navigation

    def go_back(self) -> FlowStep:
        target = _BACK_TARGETS.get(self.session.step)
        if target is None:
            raise FlowStateError(f"Cannot go back from step {self.session.step.value}")
        aggregate = self.session.aggregate
        if target is FlowStep.service_selection:
            aggregate.clear_schedule()
        elif target is FlowStep.date_time_selection:
            aggregate.clear_customer()
        self.session.confirmed = None
        self._move_to(target)
        return target

    def start_over(self) -> None:
        """Abandon the current booking and begin again from service selection."""
        if self.session.step is FlowStep.submitting:
            raise FlowStateError("Cannot start over while a booking is being submitted")
        self.session.aggregate.reset()
        self.session.confirmed = None
        self.session.last_outcome = None
        self._move_to(FlowStep.service_selection)

    # Internals

    def _require(self, *steps: FlowStep) -> None:
        if self.session.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise FlowStateError(f"Action not allowed in step {self.session.step.value} (expected {allowed})")

    def _move_to(self, step: FlowStep) -> None:
        self.session.step = step
        self.session.history.append(step)
        self._logger.debug("Flow step changed", extra={"session_id": self.session.session_id, "state": step.value})

    def _finish(self, outcome: FlowOutcome) -> FlowOutcome:
        self.session.last_outcome = outcome
        log = self._logger.info if outcome.level is OutcomeLevel.success else self._logger.warning
        extra = {
            "session_id": self.session.session_id,
            "level": outcome.level.value,
            "state": self.session.step.value,
        }
        if outcome.error is not None:
            extra["error"] = "; ".join(f"{type(e).__name__}: {e}" for e in outcome.error.errors) or str(outcome.error)
        log(outcome.message, extra=extra)
        return outcome

    def _check_bookable_date(self, day: date) -> None:
        today = self._clock().date()
        if day < today:
            raise ValidationError({"date": "Please choose a date from today onwards."})
        if day > today + timedelta(days=self._horizon_days):
            raise ValidationError({"date": f"Bookings open up to {self._horizon_days} days ahead."})

    def _current_availability(self) -> DayAvailability:
        aggregate = self.session.aggregate
        availability = self._availability.day_availability(aggregate.date, aggregate.duration_minutes)
        now = self._clock()
        if aggregate.date != now.date():
            return availability
        # Same-day bookings only for starts still ahead.
        now_minutes = now.hour * 60 + now.minute
        return DayAvailability(
            date=availability.date,
            duration_minutes=availability.duration_minutes,
            closed=availability.closed,
            slots=[slot for slot in availability.slots if slot.start_minutes > now_minutes],
        )
