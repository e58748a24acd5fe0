"""
Typed Exception Hierarchy for the Tracker Kernel.

===============================================================================
WHERE EXCEPTIONS ARE RAISED
===============================================================================

Aggregation never raises. Degenerate inputs (empty collections, inverted
custom ranges, missing project/client linkage, zero hours, zero budgets,
non-finite numbers) all resolve to a well-defined zero or empty value.

Exceptions are reserved for caller errors at the boundaries:
  - parsing a filter payload with an unknown date range preset
  - loading configuration with invalid values
  - drafting an invoice from an empty entry list
  - resuming a timer with no selected project

Every exception carries a ``code`` class attribute (machine-readable) and
structured attributes (not just a message string):

    try:
        settings = get_active_settings(path)
    except UnknownTimezoneError as e:
        log.warning("bad timezone", extra={"timezone": e.timezone})
        api_response(code=e.code, timezone=e.timezone)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    TrackerError (base)
    |
    +-- FilterError
    |   +-- InvalidDateRangeError
    |
    +-- ConfigurationError
    |   +-- UnknownTimezoneError
    |
    +-- InvoiceError
    |   +-- EmptyInvoiceError
    |
    +-- TimerError
        +-- NoProjectSelectedError
"""

from __future__ import annotations

from typing import Any


class TrackerError(Exception):
    """
    Base exception for all tracker errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "TRACKER_ERROR"


# Filter-related exceptions


class FilterError(TrackerError):
    """Base exception for analytics filter errors."""

    code: str = "FILTER_ERROR"


class InvalidDateRangeError(FilterError):
    """The filter payload names a date range preset that does not exist."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, date_range: Any, allowed: tuple[str, ...]):
        self.date_range = date_range
        self.allowed = allowed
        super().__init__(
            f"Unknown date range {date_range!r} "
            f"(expected one of: {', '.join(allowed)})"
        )


# Configuration exceptions


class ConfigurationError(TrackerError):
    """Configuration could not be loaded or failed validation."""

    code: str = "CONFIGURATION_INVALID"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for {field!r}: {reason}")


class UnknownTimezoneError(ConfigurationError):
    """The configured timezone is not a known IANA zone."""

    code: str = "UNKNOWN_TIMEZONE"

    def __init__(self, timezone: str):
        self.timezone = timezone
        super().__init__("timezone", f"unknown IANA timezone {timezone!r}")


# Invoice exceptions


class InvoiceError(TrackerError):
    """Base exception for invoice drafting errors."""

    code: str = "INVOICE_ERROR"


class EmptyInvoiceError(InvoiceError):
    """An invoice draft was requested without any time entries."""

    code: str = "EMPTY_INVOICE"

    def __init__(self) -> None:
        super().__init__("Cannot draft an invoice without time entries")


# Timer exceptions


class TimerError(TrackerError):
    """Base exception for timer errors."""

    code: str = "TIMER_ERROR"


class NoProjectSelectedError(TimerError):
    """The timer cannot resume because no project has been selected."""

    code: str = "NO_PROJECT_SELECTED"

    def __init__(self) -> None:
        super().__init__("Cannot resume timer: no project selected")
