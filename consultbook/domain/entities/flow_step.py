from __future__ import annotations

from enum import Enum


class FlowStep(str, Enum):
    service_selection = "service_selection"
    date_time_selection = "date_time_selection"
    customer_info = "customer_info"
    confirmation = "confirmation"
    submitting = "submitting"
    success = "success"
    failed = "failed"


class OutcomeLevel(str, Enum):
    success = "success"
    warning = "warning"
    error = "error"
