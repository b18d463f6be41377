from functools import lru_cache
import json
import logging
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from consultbook.core.config import settings
from consultbook.application.ports.booked_index import BookedIndexPort
from consultbook.application.ports.booking_recorder import BookingRecorderPort
from consultbook.application.ports.operator_notifier import OperatorNotifierPort
from consultbook.application.ports.service_catalog import ServiceCatalogPort
from consultbook.application.ports.session_store import BookingSessionStorePort
from consultbook.application.use_cases.availability import AvailabilityService
from consultbook.application.use_cases.booking_flow import BookingFlow
from consultbook.application.use_cases.business_calendar import BusinessCalendar
from consultbook.application.use_cases.submit_booking import SubmitBookingUseCase
from consultbook.infrastructure.calendar.business_hours_data import load_business_calendar
from consultbook.infrastructure.calendar.demo_bookings import seed_booked_slots
from consultbook.infrastructure.forms.google_form_recorder import GoogleFormRecorder
from consultbook.infrastructure.forms.mock_recorder import MockBookingRecorder
from consultbook.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from consultbook.infrastructure.store.json_booked_index import JsonBookedIndex
from consultbook.infrastructure.store.memory_booked_index import MemoryBookedIndex
from consultbook.infrastructure.store.memory_session_store import MemoryBookingSessionStore
from consultbook.infrastructure.whatsapp.mock_notifier import MockOperatorNotifier
from consultbook.infrastructure.whatsapp.whatsapp_client import WhatsAppClient
from consultbook.infrastructure.whatsapp.whatsapp_notifier import WhatsAppNotifier


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_business_calendar() -> BusinessCalendar:
    return load_business_calendar(settings.BUSINESS_HOURS_JSON)


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


@lru_cache
def get_booked_index() -> BookedIndexPort:
    index: BookedIndexPort
    if settings.BOOKED_INDEX_PATH:
        index = JsonBookedIndex(settings.BOOKED_INDEX_PATH)
    else:
        index = MemoryBookedIndex()
    if settings.SEED_BOOKED_SLOTS:
        seed_booked_slots(
            index,
            start=datetime.now(get_timezone()).date(),
            days=settings.SEED_BOOKED_SLOTS_DAYS,
            seed=settings.SEED_BOOKED_SLOTS_RANDOM_SEED,
        )
    return index


@lru_cache
def get_availability_service() -> AvailabilityService:
    return AvailabilityService(
        calendar=get_business_calendar(),
        booked_index=get_booked_index(),
        step_minutes=settings.SLOT_STEP_MINUTES,
    )


@lru_cache
def get_booking_recorder() -> BookingRecorderPort:
    logger = logging.getLogger(__name__)
    if not settings.GOOGLE_FORM_URL:
        if _is_dev():
            logger.info("Using MockBookingRecorder (form url missing, ENV=dev/local)")
            return MockBookingRecorder(currency_symbol=settings.CURRENCY_SYMBOL)
        raise ValueError("GOOGLE_FORM_URL is required to record bookings.")

    entry_ids = json.loads(settings.GOOGLE_FORM_ENTRY_IDS) if settings.GOOGLE_FORM_ENTRY_IDS else None
    logger.info("Using GoogleFormRecorder")
    return GoogleFormRecorder(
        form_url=settings.GOOGLE_FORM_URL,
        entry_ids=entry_ids,
        currency_symbol=settings.CURRENCY_SYMBOL,
    )


@lru_cache
def get_operator_notifier() -> OperatorNotifierPort:
    logger = logging.getLogger(__name__)
    logger.info(
        "WHATSAPP_ACCESS_TOKEN present=%s len=%s",
        bool(settings.WHATSAPP_ACCESS_TOKEN),
        len(settings.WHATSAPP_ACCESS_TOKEN or ""),
    )

    if not (
        settings.WHATSAPP_ACCESS_TOKEN and settings.WHATSAPP_PHONE_NUMBER_ID and settings.WHATSAPP_OPERATOR_NUMBER
    ):
        if _is_dev():
            logger.info("Using MockOperatorNotifier (WhatsApp settings missing, ENV=dev/local)")
            return MockOperatorNotifier()
        raise ValueError(
            "WHATSAPP_ACCESS_TOKEN, WHATSAPP_PHONE_NUMBER_ID and WHATSAPP_OPERATOR_NUMBER are required."
        )

    logger.info("Using WhatsAppNotifier")
    client = WhatsAppClient(
        access_token=settings.WHATSAPP_ACCESS_TOKEN,
        phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
        graph_api_version=settings.WHATSAPP_GRAPH_API_VERSION,
    )
    return WhatsAppNotifier(client=client, operator_number=settings.WHATSAPP_OPERATOR_NUMBER)


@lru_cache
def get_submit_booking_use_case() -> SubmitBookingUseCase:
    return SubmitBookingUseCase(
        recorder=get_booking_recorder(),
        notifier=get_operator_notifier(),
        currency_symbol=settings.CURRENCY_SYMBOL,
        timeout_seconds=settings.SUBMISSION_TIMEOUT_SECONDS,
    )


@lru_cache
def get_session_store() -> BookingSessionStorePort:
    return MemoryBookingSessionStore()


def new_booking_flow() -> BookingFlow:
    return BookingFlow(
        catalog=get_service_catalog(),
        availability=get_availability_service(),
        submitter=get_submit_booking_use_case(),
        timezone=get_timezone(),
        horizon_days=settings.BOOKING_HORIZON_DAYS,
        currency_symbol=settings.CURRENCY_SYMBOL,
    )


def get_flow_factory() -> Callable[[], BookingFlow]:
    return new_booking_flow
