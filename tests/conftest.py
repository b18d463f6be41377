from __future__ import annotations

import asyncio
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from consultbook.application.ports.booking_recorder import BookingRecorderPort
from consultbook.application.ports.operator_notifier import OperatorNotifierPort
from consultbook.application.use_cases.availability import AvailabilityService
from consultbook.application.use_cases.booking_flow import BookingFlow
from consultbook.application.use_cases.submit_booking import SubmitBookingUseCase
from consultbook.domain.entities.booking import ConfirmedBooking
from consultbook.infrastructure.calendar.business_hours_data import load_business_calendar
from consultbook.infrastructure.forms.mock_recorder import MockBookingRecorder
from consultbook.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from consultbook.infrastructure.store.memory_booked_index import MemoryBookedIndex
from consultbook.infrastructure.whatsapp.mock_notifier import MockOperatorNotifier

TZ = ZoneInfo("Asia/Kolkata")
# Friday morning; the following Monday is 2024-03-04.
NOW = datetime(2024, 3, 1, 8, 0, tzinfo=TZ)
MONDAY = date(2024, 3, 4)
SATURDAY = date(2024, 3, 9)
SUNDAY = date(2024, 3, 10)

CUSTOMER = {
    "first_name": "Asha",
    "last_name": "Mehta",
    "email": "asha@example.com",
    "phone": "+91 99134-48866",
    "project_type": "Residential",
    "details": "Two-storey house on a corner plot.",
}


class FailingNotifier(OperatorNotifierPort):
    def __init__(self) -> None:
        self.calls = 0

    async def notify(self, text: str) -> None:
        self.calls += 1
        raise RuntimeError("operator channel unavailable")


class FailingRecorder(BookingRecorderPort):
    def __init__(self) -> None:
        self.calls = 0

    async def record(self, booking: ConfirmedBooking) -> None:
        self.calls += 1
        raise RuntimeError("form sink unavailable")


class GatedRecorder(BookingRecorderPort):
    """Blocks until released, so a submission can be observed mid-flight."""

    def __init__(self) -> None:
        self.calls = 0
        self.release = asyncio.Event()

    async def record(self, booking: ConfirmedBooking) -> None:
        self.calls += 1
        await self.release.wait()


@pytest.fixture
def calendar():
    return load_business_calendar()


@pytest.fixture
def booked_index():
    return MemoryBookedIndex()


@pytest.fixture
def availability(calendar, booked_index):
    return AvailabilityService(calendar=calendar, booked_index=booked_index, step_minutes=30)


@pytest.fixture
def recorder():
    return MockBookingRecorder()


@pytest.fixture
def notifier():
    return MockOperatorNotifier()


@pytest.fixture
def make_flow(availability, recorder, notifier):
    def _make(recorder_=None, notifier_=None, timeout_seconds: float | None = 5.0, clock=None) -> BookingFlow:
        submitter = SubmitBookingUseCase(
            recorder=recorder_ or recorder,
            notifier=notifier_ or notifier,
            timeout_seconds=timeout_seconds,
        )
        return BookingFlow(
            catalog=ServiceCatalogStore(),
            availability=availability,
            submitter=submitter,
            timezone=TZ,
            clock=clock or (lambda: NOW),
        )

    return _make


def drive_to_confirmation(flow: BookingFlow, service: str = "architecture", day: date = MONDAY, time: str = "10:30") -> None:
    flow.select_service(service)
    flow.continue_to_schedule()
    flow.select_date(day)
    flow.select_slot(time)
    flow.continue_to_customer_info()
    assert flow.submit_customer_info(CUSTOMER) == {}
