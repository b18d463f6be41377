from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest

from consultbook.application.exceptions import FlowStateError, ServiceNotFoundError, SubmissionError, ValidationError
from consultbook.application.ports.service_catalog import ServiceCatalogPort
from consultbook.application.use_cases.booking_flow import BookingFlow
from consultbook.application.use_cases.submit_booking import SubmitBookingUseCase
from consultbook.domain.entities.flow_step import FlowStep, OutcomeLevel
from consultbook.domain.entities.service_catalog import ServiceCatalogEntry
from consultbook.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG

from conftest import (
    CUSTOMER,
    MONDAY,
    NOW,
    SUNDAY,
    TZ,
    FailingNotifier,
    FailingRecorder,
    GatedRecorder,
    drive_to_confirmation,
)


def test_flow_starts_empty_in_service_selection(make_flow):
    flow = make_flow()
    assert flow.step is FlowStep.service_selection
    assert flow.session.aggregate.service_key is None


def test_cannot_skip_service_selection(make_flow):
    flow = make_flow()
    with pytest.raises(ValidationError) as exc:
        flow.continue_to_schedule()
    assert "service" in exc.value.errors

    with pytest.raises(FlowStateError):
        flow.select_date(MONDAY)
    with pytest.raises(FlowStateError):
        flow.select_slot("10:00")
    with pytest.raises(FlowStateError):
        flow.continue_to_customer_info()
    with pytest.raises(FlowStateError):
        flow.submit_customer_info(CUSTOMER)
    assert flow.step is FlowStep.service_selection


@pytest.mark.asyncio
async def test_cannot_confirm_before_confirmation_step(make_flow, recorder):
    flow = make_flow()
    flow.select_service("general")
    with pytest.raises(FlowStateError):
        await flow.confirm()
    assert recorder.records == []


def test_unknown_service(make_flow):
    flow = make_flow()
    with pytest.raises(ServiceNotFoundError):
        flow.select_service("landscaping")


def test_service_details_are_copied(make_flow):
    flow = make_flow()
    flow.select_service("architecture")
    flow.continue_to_schedule()
    aggregate = flow.session.aggregate
    assert (aggregate.service_name, aggregate.duration_minutes, aggregate.price) == (
        "Architecture Consultation",
        90,
        200,
    )
    assert aggregate.duration_minutes == SERVICE_CATALOG["architecture"].duration_minutes


def test_picking_a_date_does_not_pick_a_time(make_flow):
    flow = make_flow()
    flow.select_service("architecture")
    flow.continue_to_schedule()
    availability = flow.select_date(MONDAY)
    assert availability.has_start("10:30")
    assert flow.session.aggregate.start_time is None
    with pytest.raises(ValidationError):
        flow.continue_to_customer_info()

    flow.select_slot("10:30")
    flow.select_date(MONDAY + timedelta(days=1))
    assert flow.session.aggregate.start_time is None


def test_slot_must_be_offered(make_flow, booked_index):
    flow = make_flow()
    flow.select_service("architecture")
    flow.continue_to_schedule()
    flow.select_date(MONDAY)
    booked_index.add(MONDAY, "09:00")
    with pytest.raises(ValidationError) as exc:
        flow.select_slot("11:00")  # crosses lunch break
    assert "time" in exc.value.errors
    with pytest.raises(ValidationError):
        flow.select_slot("09:00")  # already taken
    with pytest.raises(ValidationError):
        flow.select_slot("10:15")  # off the grid


def test_closed_day_reports_closed(make_flow):
    flow = make_flow()
    flow.select_service("general")
    flow.continue_to_schedule()
    availability = flow.select_date(SUNDAY)
    assert availability.closed
    assert availability.slots == []
    with pytest.raises(ValidationError) as exc:
        flow.select_slot("10:00")
    assert "date" in exc.value.errors


def test_past_dates_and_far_future_are_rejected(make_flow):
    flow = make_flow()
    flow.select_service("general")
    flow.continue_to_schedule()
    with pytest.raises(ValidationError):
        flow.select_date(NOW.date() - timedelta(days=1))
    with pytest.raises(ValidationError):
        flow.select_date(NOW.date() + timedelta(days=91))
    assert flow.session.aggregate.date is None


def test_same_day_only_offers_later_starts(make_flow):
    # NOW is Friday 08:00, before opening, so the whole day is still open.
    flow = make_flow()
    flow.select_service("general")
    flow.continue_to_schedule()
    today = flow.select_date(NOW.date())
    assert today.slots[0].start_time == "09:00"


def test_same_day_drops_starts_already_passed(make_flow):
    flow = make_flow(clock=lambda: datetime(2024, 3, 4, 10, 10, tzinfo=TZ))
    flow.select_service("general")
    flow.continue_to_schedule()
    today = flow.select_date(MONDAY)
    assert today.slots[0].start_time == "10:30"
    with pytest.raises(ValidationError):
        flow.select_slot("10:00")

    assert flow.available_slots().slots == today.slots


def test_customer_errors_block_advance(make_flow):
    flow = make_flow()
    flow.select_service("interior")
    flow.continue_to_schedule()
    flow.select_date(MONDAY)
    flow.select_slot("09:00")
    flow.continue_to_customer_info()

    errors = flow.submit_customer_info({**CUSTOMER, "email": "nope", "last_name": ""})
    assert set(errors) == {"email", "last_name"}
    assert flow.step is FlowStep.customer_info
    assert flow.session.aggregate.customer is None

    assert flow.submit_customer_info(CUSTOMER) == {}
    assert flow.step is FlowStep.confirmation
    summary = flow.summary()
    assert summary["service"] == "Interior Design Consultation"
    assert summary["date"] == "Monday, March 4, 2024"
    assert summary["time"] == "9:00 AM"
    assert summary["price"] == "₹200"


def test_going_back_discards_only_later_fields(make_flow):
    flow = make_flow()
    drive_to_confirmation(flow)

    assert flow.go_back() is FlowStep.customer_info
    assert flow.session.aggregate.customer is not None

    assert flow.go_back() is FlowStep.date_time_selection
    aggregate = flow.session.aggregate
    assert aggregate.customer is None
    assert aggregate.service_key == "architecture"
    assert (aggregate.date, aggregate.start_time) == (MONDAY, "10:30")

    assert flow.go_back() is FlowStep.service_selection
    assert aggregate.service_key == "architecture"
    assert (aggregate.date, aggregate.start_time) == (None, None)

    with pytest.raises(FlowStateError):
        flow.go_back()


@pytest.mark.asyncio
async def test_successful_confirmation_reserves_slot(make_flow, booked_index, recorder, notifier):
    flow = make_flow()
    drive_to_confirmation(flow)
    assert not booked_index.contains(MONDAY, "10:30")

    outcome = await flow.confirm()

    assert outcome.level is OutcomeLevel.success
    assert flow.step is FlowStep.success
    assert booked_index.contains(MONDAY, "10:30")
    assert len(recorder.records) == 1
    assert recorder.records[0]["time"] == "10:30 AM"
    assert len(notifier.messages) == 1
    assert "Architecture Consultation" in notifier.messages[0]
    assert flow.session.confirmed.submitted_at == NOW

    with pytest.raises(FlowStateError):
        flow.go_back()
    flow.start_over()
    assert flow.step is FlowStep.service_selection
    assert flow.session.aggregate.service_key is None


@pytest.mark.asyncio
async def test_notification_failure_does_not_reserve_slot(make_flow, booked_index, recorder):
    notifier = FailingNotifier()
    flow = make_flow(notifier_=notifier)
    drive_to_confirmation(flow)

    outcome = await flow.confirm()

    assert outcome.level is OutcomeLevel.error
    assert isinstance(outcome.error, SubmissionError)
    assert "operator channel unavailable" in str(outcome.error.errors[0])
    # Recorded but not notified, and nothing rolled back.
    assert len(recorder.records) == 1
    assert notifier.calls == 1
    assert not booked_index.contains(MONDAY, "10:30")
    assert flow.step is FlowStep.confirmation
    assert flow.session.history[-3:] == [FlowStep.submitting, FlowStep.failed, FlowStep.confirmation]


@pytest.mark.asyncio
async def test_retry_resubmits_the_same_booking(make_flow, booked_index, notifier):
    failing = FailingRecorder()
    flow = make_flow(recorder_=failing)
    drive_to_confirmation(flow)

    assert (await flow.confirm()).level is OutcomeLevel.error
    first = flow.session.confirmed
    assert (await flow.confirm()).level is OutcomeLevel.error
    assert flow.session.confirmed is first
    assert failing.calls == 2
    # The notifier ran on both attempts; duplicates are expected on retry.
    assert len(notifier.messages) == 2
    assert not booked_index.contains(MONDAY, "10:30")


@pytest.mark.asyncio
async def test_duplicate_confirm_while_submitting_is_ignored(make_flow, booked_index):
    gated = GatedRecorder()
    flow = make_flow(recorder_=gated)
    drive_to_confirmation(flow)

    first = asyncio.create_task(flow.confirm())
    await asyncio.sleep(0)
    assert flow.step is FlowStep.submitting

    second = await flow.confirm()
    assert second.level is OutcomeLevel.warning

    gated.release.set()
    result = await first
    assert result.level is OutcomeLevel.success
    assert gated.calls == 1
    assert booked_index.contains(MONDAY, "10:30")


@pytest.mark.asyncio
async def test_cancelled_submission_can_be_retried(make_flow, booked_index):
    gated = GatedRecorder()
    flow = make_flow(recorder_=gated)
    drive_to_confirmation(flow)

    pending = asyncio.create_task(flow.confirm())
    await asyncio.sleep(0)
    assert flow.step is FlowStep.submitting
    pending.cancel()
    with pytest.raises(asyncio.CancelledError):
        await pending
    assert flow.step is FlowStep.confirmation

    gated.release.set()
    outcome = await flow.confirm()
    assert outcome.level is OutcomeLevel.success
    assert booked_index.contains(MONDAY, "10:30")


@pytest.mark.asyncio
async def test_index_write_failure_keeps_confirmed_booking(make_flow, booked_index, recorder, notifier, monkeypatch):
    def disk_full(day, start_time):
        raise OSError("disk full")

    monkeypatch.setattr(booked_index, "add", disk_full)
    flow = make_flow()
    drive_to_confirmation(flow)

    outcome = await flow.confirm()

    assert outcome.level is OutcomeLevel.warning
    assert flow.session.confirmed.reference in outcome.message
    assert isinstance(outcome.error, SubmissionError)
    assert flow.step is FlowStep.success
    assert len(recorder.records) == 1
    assert len(notifier.messages) == 1
    # Not left in submitting; the finished booking is not sent twice.
    with pytest.raises(FlowStateError):
        await flow.confirm()
    assert len(recorder.records) == 1


def test_start_over_abandons_booking_mid_flow(make_flow):
    flow = make_flow()
    drive_to_confirmation(flow)
    flow.start_over()
    assert flow.step is FlowStep.service_selection
    assert flow.session.aggregate.service_key is None
    assert flow.session.aggregate.customer is None


@pytest.mark.asyncio
async def test_start_over_waits_for_submission(make_flow):
    gated = GatedRecorder()
    flow = make_flow(recorder_=gated)
    drive_to_confirmation(flow)

    pending = asyncio.create_task(flow.confirm())
    await asyncio.sleep(0)
    with pytest.raises(FlowStateError):
        flow.start_over()

    gated.release.set()
    assert (await pending).level is OutcomeLevel.success


@pytest.mark.asyncio
async def test_slot_taken_meanwhile_sends_user_back_to_schedule(make_flow, booked_index, recorder):
    flow = make_flow()
    drive_to_confirmation(flow)
    booked_index.add(MONDAY, "10:30")

    outcome = await flow.confirm()

    assert outcome.level is OutcomeLevel.error
    assert flow.step is FlowStep.date_time_selection
    assert flow.session.aggregate.start_time is None
    assert flow.session.aggregate.customer is not None
    assert recorder.records == []


def test_two_sessions_do_not_share_state(make_flow):
    first, second = make_flow(), make_flow()
    first.select_service("architecture")
    assert second.session.aggregate.service_key is None
    assert first.session.session_id != second.session.session_id


class _EditableCatalog(ServiceCatalogPort):
    def __init__(self) -> None:
        self.entries = dict(SERVICE_CATALOG)

    def get_service(self, service_key: str) -> ServiceCatalogEntry | None:
        return self.entries.get(service_key)

    def list_services(self) -> list[ServiceCatalogEntry]:
        return list(self.entries.values())


def test_catalog_changes_do_not_reach_inflight_booking(availability, recorder, notifier):
    catalog = _EditableCatalog()
    flow = BookingFlow(
        catalog=catalog,
        availability=availability,
        submitter=SubmitBookingUseCase(recorder=recorder, notifier=notifier),
        timezone=TZ,
        clock=lambda: NOW,
    )
    flow.select_service("general")
    catalog.entries["general"] = ServiceCatalogEntry("general", "General Consultation", 30, 500)
    flow.continue_to_schedule()

    assert flow.session.aggregate.duration_minutes == 45
    assert flow.session.aggregate.price == 200
