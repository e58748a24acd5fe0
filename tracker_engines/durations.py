"""
Duration and money display helpers used by the timer, the entry list and
the reports screen.

Pure functions; ``is_time_overlapping`` takes ``now`` explicitly for open
spans instead of reading the clock.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from tracker_engines.earnings import ZERO, seconds_to_hours, to_decimal, to_local

_TWO_PLACES = Decimal("0.01")

_CLOCK_FORMAT = re.compile(r"^(\d+):(\d+):(\d+)$")
_HOUR_MINUTE_FORMAT = re.compile(r"^(\d+)h\s*(\d+)m$")
_MINUTE_FORMAT = re.compile(r"^(\d+)m$")

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def _whole_seconds(seconds: Any) -> int:
    return int(to_decimal(seconds))


def format_duration(seconds: Any) -> str:
    """``3725`` -> ``"1:02:05"``; negative input -> ``"0:00:00"``."""
    total = _whole_seconds(seconds)
    if total < 0:
        return "0:00:00"
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


def format_duration_short(seconds: Any) -> str:
    """``5400`` -> ``"1h 30m"``; under an hour -> ``"45m"``; negative -> ``"0h 0m"``."""
    total = _whole_seconds(seconds)
    if total < 0:
        return "0h 0m"
    hours, remainder = divmod(total, 3600)
    minutes = remainder // 60
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"


def parse_duration(text: str) -> int:
    """Parse ``"1:30:00"``, ``"1h 30m"`` or ``"90m"`` into seconds.

    Anything else parses as 0.
    """
    value = text.strip()
    match = _CLOCK_FORMAT.match(value)
    if match:
        hours, minutes, secs = (int(g) for g in match.groups())
        return hours * 3600 + minutes * 60 + secs
    match = _HOUR_MINUTE_FORMAT.match(value)
    if match:
        hours, minutes = (int(g) for g in match.groups())
        return hours * 3600 + minutes * 60
    match = _MINUTE_FORMAT.match(value)
    if match:
        return int(match.group(1)) * 60
    return 0


def calculate_earnings(seconds: Any, hourly_rate: Any) -> Decimal:
    return seconds_to_hours(to_decimal(seconds)) * to_decimal(hourly_rate)


def format_currency(amount: Any, currency: str = "USD") -> str:
    """``Decimal("1234.5")`` -> ``"$1,234.50"``.

    Currencies without a known symbol are prefixed with their code.
    """
    value = to_decimal(amount).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if value < ZERO else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def is_time_overlapping(
    start1: datetime,
    end1: datetime | None,
    start2: datetime,
    end2: datetime | None,
    now: datetime,
) -> bool:
    """True if two spans overlap; an open span (``end=None``) runs until ``now``.

    Naive datetimes are read in the timezone of ``now`` (UTC if ``now`` is
    naive too), so naive and aware spans can be compared.
    """
    zone = now.tzinfo or timezone.utc
    now = to_local(now, zone)
    start1, start2 = to_local(start1, zone), to_local(start2, zone)
    effective_end1 = to_local(end1, zone) if end1 is not None else now
    effective_end2 = to_local(end2, zone) if end2 is not None else now
    return start1 < effective_end2 and start2 < effective_end1
