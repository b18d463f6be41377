import datetime as dt
from typing import Any

from pydantic import BaseModel, Field

from consultbook.domain.entities.flow_step import FlowStep, OutcomeLevel


class ServiceSchema(BaseModel):
    key: str
    name: str
    duration_minutes: int
    price: int
    price_display: str
    description: str | None = None


class BusinessDaySchema(BaseModel):
    weekday: int
    name: str
    closed: bool
    start: str | None = None
    end: str | None = None
    breaks: list[list[str]] = Field(default_factory=list)


class SlotSchema(BaseModel):
    start: str
    end: str
    label: str


class DayAvailabilitySchema(BaseModel):
    date: dt.date
    duration_minutes: int
    closed: bool
    slots: list[SlotSchema]
    message: str | None = None


class SelectServiceRequest(BaseModel):
    service: str


class SelectDateRequest(BaseModel):
    date: dt.date


class SelectSlotRequest(BaseModel):
    time: str = Field(pattern=r"^\d{2}:\d{2}$")


class CustomerInfoRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    company: str | None = None
    project_type: str | None = None
    budget: str | None = None
    timeline: str | None = None
    details: str | None = None
    special_requests: str | None = None
    newsletter_opt_in: bool = False


class OutcomeSchema(BaseModel):
    level: OutcomeLevel
    message: str
    error: str | None = None


class SessionSchema(BaseModel):
    session_id: str
    step: FlowStep
    service: str | None = None
    service_name: str | None = None
    duration_minutes: int | None = None
    price: int | None = None
    date: dt.date | None = None
    time: str | None = None
    customer_complete: bool = False
    summary: dict[str, Any] | None = None
    reference: str | None = None
    last_outcome: OutcomeSchema | None = None
