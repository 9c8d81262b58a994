class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class TimeFormatError(ValidationError):
    """Raised when a time-of-day or date string cannot be parsed."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist for the tenant."""


class ClockInRejected(DomainError):
    """Raised when a clock-in is refused for the selected site.

    ``reason`` is ``"active_work"`` (an unfinished shift exists on that site) or
    ``"recent_clock_out"`` (the last shift there ended moments ago and the caller
    has not confirmed the re-clock-in).
    """

    def __init__(self, message: str, *, reason: str, minutes_since: int | None = None):
        super().__init__(message)
        self.reason = reason
        self.minutes_since = minutes_since


class NoDataToExportError(DomainError):
    """Raised when an export is requested for an empty aggregation."""
