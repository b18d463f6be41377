from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from fastapi import APIRouter, Depends, Query

from consultbook.api.v1.schemas import (
    BusinessDaySchema,
    CustomerInfoRequest,
    DayAvailabilitySchema,
    OutcomeSchema,
    SelectDateRequest,
    SelectServiceRequest,
    SelectSlotRequest,
    ServiceSchema,
    SessionSchema,
    SlotSchema,
)
from consultbook.application.exceptions import ServiceNotFoundError, SessionNotFoundError, ValidationError
from consultbook.application.ports.service_catalog import ServiceCatalogPort
from consultbook.application.ports.session_store import BookingSessionStorePort
from consultbook.application.use_cases.availability import AvailabilityService, DayAvailability
from consultbook.application.use_cases.booking_flow import BookingFlow, FlowOutcome
from consultbook.application.utils.booking_format import format_price
from consultbook.application.utils.clock import format_time_12h
from consultbook.core.config import settings
from consultbook.domain.entities.flow_step import FlowStep
from consultbook.wiring.dependencies import (
    get_availability_service,
    get_flow_factory,
    get_service_catalog,
    get_session_store,
)

router = APIRouter()
logger = logging.getLogger(__name__)

CLOSED_MESSAGE = "Office is closed on this day"
NO_SLOTS_MESSAGE = "No available slots for this date"


def _availability_schema(availability: DayAvailability) -> DayAvailabilitySchema:
    message = None
    if availability.closed:
        message = CLOSED_MESSAGE
    elif not availability.slots:
        message = NO_SLOTS_MESSAGE
    return DayAvailabilitySchema(
        date=availability.date,
        duration_minutes=availability.duration_minutes,
        closed=availability.closed,
        slots=[
            SlotSchema(start=slot.start_time, end=slot.end_time, label=format_time_12h(slot.start_time))
            for slot in availability.slots
        ],
        message=message,
    )


def _session_schema(flow: BookingFlow) -> SessionSchema:
    session = flow.session
    aggregate = session.aggregate
    summary = flow.summary() if session.step in (FlowStep.confirmation, FlowStep.success) else None
    return SessionSchema(
        session_id=session.session_id,
        step=session.step,
        service=aggregate.service_key,
        service_name=aggregate.service_name,
        duration_minutes=aggregate.duration_minutes,
        price=aggregate.price,
        date=aggregate.date,
        time=aggregate.start_time,
        customer_complete=aggregate.customer is not None,
        summary=summary,
        reference=session.confirmed.reference if session.confirmed else None,
        last_outcome=_outcome_schema(session.last_outcome) if session.last_outcome else None,
    )


def _outcome_schema(outcome: FlowOutcome) -> OutcomeSchema:
    return OutcomeSchema(
        level=outcome.level,
        message=outcome.message,
        error=str(outcome.error) if outcome.error else None,
    )


def _load_flow(session_id: str, store: BookingSessionStorePort) -> BookingFlow:
    flow = store.get(session_id)
    if flow is None:
        raise SessionNotFoundError(f"Unknown booking session: {session_id}")
    return flow


@router.get("/services", response_model=list[ServiceSchema])
def list_services(catalog: ServiceCatalogPort = Depends(get_service_catalog)):
    return [
        ServiceSchema(
            key=entry.service_key,
            name=entry.display_name,
            duration_minutes=entry.duration_minutes,
            price=entry.price,
            price_display=format_price(entry.price, settings.CURRENCY_SYMBOL),
            description=entry.description,
        )
        for entry in catalog.list_services()
    ]


@router.get("/business-hours", response_model=list[BusinessDaySchema])
def business_hours(availability: AvailabilityService = Depends(get_availability_service)):
    return [BusinessDaySchema(**day) for day in availability.calendar.describe()]


@router.get("/availability", response_model=DayAvailabilitySchema)
def availability_for_day(
    day: date = Query(..., alias="date"),
    service: str = Query(...),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
    availability: AvailabilityService = Depends(get_availability_service),
):
    entry = catalog.get_service(service)
    if entry is None:
        raise ServiceNotFoundError(f"Unknown service: {service}")
    return _availability_schema(availability.day_availability(day, entry.duration_minutes))


@router.post("/bookings", response_model=SessionSchema, status_code=201)
async def start_booking(
    store: BookingSessionStorePort = Depends(get_session_store),
    flow_factory: Callable[[], BookingFlow] = Depends(get_flow_factory),
):
    flow = flow_factory()
    store.create(flow)
    logger.info("Booking session started", extra={"session_id": flow.session.session_id})
    return _session_schema(flow)


@router.get("/bookings/{session_id}", response_model=SessionSchema)
async def get_booking(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    return _session_schema(_load_flow(session_id, store))


@router.post("/bookings/{session_id}/service", response_model=SessionSchema)
async def choose_service(
    session_id: str,
    req: SelectServiceRequest,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    flow = _load_flow(session_id, store)
    flow.select_service(req.service)
    flow.continue_to_schedule()
    return _session_schema(flow)


@router.post("/bookings/{session_id}/date", response_model=DayAvailabilitySchema)
async def choose_date(
    session_id: str,
    req: SelectDateRequest,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    flow = _load_flow(session_id, store)
    return _availability_schema(flow.select_date(req.date))


@router.get("/bookings/{session_id}/slots", response_model=DayAvailabilitySchema)
async def list_slots(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _load_flow(session_id, store)
    return _availability_schema(flow.available_slots())


@router.post("/bookings/{session_id}/slot", response_model=SessionSchema)
async def choose_slot(
    session_id: str,
    req: SelectSlotRequest,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    flow = _load_flow(session_id, store)
    flow.select_slot(req.time)
    flow.continue_to_customer_info()
    return _session_schema(flow)


@router.post("/bookings/{session_id}/customer", response_model=SessionSchema)
async def enter_customer_info(
    session_id: str,
    req: CustomerInfoRequest,
    store: BookingSessionStorePort = Depends(get_session_store),
):
    flow = _load_flow(session_id, store)
    errors = flow.submit_customer_info(req.model_dump())
    if errors:
        raise ValidationError(errors)
    return _session_schema(flow)


@router.post("/bookings/{session_id}/back", response_model=SessionSchema)
async def go_back(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _load_flow(session_id, store)
    flow.go_back()
    return _session_schema(flow)


@router.post("/bookings/{session_id}/confirm", response_model=OutcomeSchema)
async def confirm_booking(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _load_flow(session_id, store)
    outcome = await flow.confirm()
    return _outcome_schema(outcome)


@router.post("/bookings/{session_id}/restart", response_model=SessionSchema)
async def restart_booking(session_id: str, store: BookingSessionStorePort = Depends(get_session_store)):
    flow = _load_flow(session_id, store)
    flow.start_over()
    return _session_schema(flow)
