from __future__ import annotations


class ParseError(ValueError):
    """Raised when a clock string is not a valid 24-hour "HH:MM" value."""
    pass


class ClockRangeError(ValueError):
    """Raised when a minute offset falls outside a single day (0..1439)."""
    pass


class ValidationError(ValueError):
    """Raised when user input for a step fails validation.

    Errors are reported per field so the caller can show each message next to
    the offending input.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors.items()))


class FlowStateError(RuntimeError):
    """Raised when a booking command is not allowed in the current step."""
    pass


class SubmissionError(RuntimeError):
    """Raised when the persistence or notification collaborator fails."""

    def __init__(self, message: str, errors: list[BaseException] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class ServiceNotFoundError(LookupError):
    pass


class SessionNotFoundError(LookupError):
    pass
