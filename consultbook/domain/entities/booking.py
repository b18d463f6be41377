from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any

from consultbook.domain.entities.service_catalog import ServiceCatalogEntry
from consultbook.domain.entities.slot import slot_key


@dataclass(frozen=True)
class CustomerDetails:
    first_name: str
    last_name: str
    email: str
    phone: str
    company: str | None = None
    project_type: str | None = None
    budget: str | None = None
    timeline: str | None = None
    details: str | None = None
    special_requests: str | None = None
    newsletter_opt_in: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> "CustomerDetails":
        def _clean(key: str) -> str | None:
            value = payload.get(key)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        return CustomerDetails(
            first_name=_clean("first_name") or "",
            last_name=_clean("last_name") or "",
            email=_clean("email") or "",
            phone=_clean("phone") or "",
            company=_clean("company"),
            project_type=_clean("project_type"),
            budget=_clean("budget"),
            timeline=_clean("timeline"),
            details=_clean("details"),
            special_requests=_clean("special_requests"),
            newsletter_opt_in=bool(payload.get("newsletter_opt_in", False)),
        )


@dataclass
class BookingAggregate:
    """In-progress reservation, filled in step by step."""

    service_key: str | None = None
    service_name: str | None = None
    duration_minutes: int | None = None
    price: int | None = None
    date: date | None = None
    start_time: str | None = None  # HH:MM
    customer: CustomerDetails | None = None

    def apply_service(self, entry: ServiceCatalogEntry) -> None:
        # Copy, so later catalog edits do not reach this booking.
        self.service_key = entry.service_key
        self.service_name = entry.display_name
        self.duration_minutes = entry.duration_minutes
        self.price = entry.price

    def clear_service(self) -> None:
        self.service_key = None
        self.service_name = None
        self.duration_minutes = None
        self.price = None

    def clear_schedule(self) -> None:
        self.date = None
        self.start_time = None

    def clear_customer(self) -> None:
        self.customer = None

    def reset(self) -> None:
        self.clear_service()
        self.clear_schedule()
        self.clear_customer()


@dataclass(frozen=True)
class ConfirmedBooking:
    reference: str
    service_key: str
    service_name: str
    duration_minutes: int
    price: int
    date: date
    start_time: str
    customer: CustomerDetails
    submitted_at: datetime

    @property
    def slot_key(self) -> str:
        return slot_key(self.date, self.start_time)

    @staticmethod
    def from_aggregate(aggregate: BookingAggregate, reference: str, submitted_at: datetime) -> "ConfirmedBooking":
        if not (
            aggregate.service_key
            and aggregate.service_name
            and aggregate.duration_minutes
            and aggregate.price is not None
            and aggregate.date
            and aggregate.start_time
            and aggregate.customer
        ):
            raise ValueError("Booking is incomplete and cannot be confirmed")
        return ConfirmedBooking(
            reference=reference,
            service_key=aggregate.service_key,
            service_name=aggregate.service_name,
            duration_minutes=aggregate.duration_minutes,
            price=aggregate.price,
            date=aggregate.date,
            start_time=aggregate.start_time,
            customer=replace(aggregate.customer),
            submitted_at=submitted_at,
        )
