from __future__ import annotations

import re

from consultbook.domain.entities.booking import CustomerDetails

REQUIRED_FIELDS = ("first_name", "last_name", "email", "phone")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-()]")

REQUIRED_MESSAGE = "This field is required"
EMAIL_MESSAGE = "Please enter a valid email address"
PHONE_MESSAGE = "Please enter a valid phone number"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_RE.match(PHONE_SEPARATORS_RE.sub("", phone)))


def validate_customer(customer: CustomerDetails) -> dict[str, str]:
    """Return field -> message for every invalid required field. Empty means valid."""
    errors: dict[str, str] = {}
    for field_name in REQUIRED_FIELDS:
        value = (getattr(customer, field_name) or "").strip()
        if not value:
            errors[field_name] = REQUIRED_MESSAGE
            continue
        if field_name == "email" and not is_valid_email(value):
            errors[field_name] = EMAIL_MESSAGE
        elif field_name == "phone" and not is_valid_phone(value):
            errors[field_name] = PHONE_MESSAGE
    return errors
