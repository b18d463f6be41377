from __future__ import annotations

import json
import logging

from consultbook.application.use_cases.business_calendar import BusinessCalendar

DEFAULT_BUSINESS_HOURS = {
    "monday": {"start": "09:00", "end": "17:00", "breaks": [["12:00", "13:00"]]},
    "tuesday": {"start": "09:00", "end": "17:00", "breaks": [["12:00", "13:00"]]},
    "wednesday": {"start": "09:00", "end": "17:00", "breaks": [["12:00", "13:00"]]},
    "thursday": {"start": "09:00", "end": "17:00", "breaks": [["12:00", "13:00"]]},
    "friday": {"start": "09:00", "end": "17:00", "breaks": [["12:00", "13:00"]]},
    "saturday": {"start": "10:00", "end": "16:00", "breaks": []},
    "sunday": {"closed": True},
}

logger = logging.getLogger(__name__)


def load_business_calendar(raw_json: str | None = None) -> BusinessCalendar:
    """Weekly calendar from a JSON override, or the default week when none is set."""
    if not raw_json or not raw_json.strip():
        return BusinessCalendar.from_config(DEFAULT_BUSINESS_HOURS)
    try:
        config = json.loads(raw_json)
    except json.JSONDecodeError as e:
        raise ValueError(f"BUSINESS_HOURS_JSON is not valid JSON: {e}") from e
    if not isinstance(config, dict):
        raise ValueError("BUSINESS_HOURS_JSON must be an object keyed by weekday name")
    logger.info("Using configured business hours", extra={"reason": ",".join(sorted(config))})
    return BusinessCalendar.from_config(config)
