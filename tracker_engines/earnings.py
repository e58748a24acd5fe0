"""
Module: tracker_engines.earnings
Responsibility:
    Numeric normalization and the per-entry arithmetic every other engine
    shares: effective duration, effective hourly rate, earnings, and the
    ``EntryTotals`` accumulator used by all bucketed reductions.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import tracker_kernel.domain.

Invariants enforced:
    - Decimal-only arithmetic in every output.
    - Non-finite or negative durations contribute 0 seconds.
    - Division by zero yields 0, never NaN or Infinity.
    - Earnings precedence: entry override rate, then project rate, then
      the default hourly rate, then 0.  A rate that is missing, zero,
      negative or non-finite falls through to the next source.
    - Non-billable entries earn 0.

Failure modes:
    - None.  Every function accepts malformed numbers and normalizes them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from tracker_kernel.domain.entries import TimeEntry

ZERO = Decimal("0")
HUNDRED = Decimal("100")
SECONDS_PER_HOUR = Decimal("3600")


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def to_decimal(value: Any) -> Decimal:
    """Convert a number to a finite Decimal; anything else becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else ZERO
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator``, or 0 when the denominator is 0."""
    if not denominator:
        return ZERO
    return numerator / denominator


def safe_percentage(part: Decimal, whole: Decimal) -> Decimal:
    """``part / whole * 100``, or 0 when ``whole`` is 0."""
    return safe_ratio(part, whole) * HUNDRED


def seconds_to_hours(seconds: Decimal) -> Decimal:
    return seconds / SECONDS_PER_HOUR


def to_local(moment: datetime, tz: tzinfo) -> datetime:
    """Express ``moment`` in ``tz``; naive values are taken as already local."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


# ---------------------------------------------------------------------------
# Per-entry arithmetic
# ---------------------------------------------------------------------------


def effective_duration_seconds(entry: TimeEntry) -> Decimal:
    """Seconds an entry contributes to aggregation.

    A recorded ``duration_seconds`` is authoritative: 0 if negative or
    non-finite, even when ``end_time`` is set.
    Without it, a closed entry contributes ``end_time - start_time``; an
    open entry contributes 0.
    """
    if entry.duration_seconds is not None:
        seconds = to_decimal(entry.duration_seconds)
    elif entry.end_time is not None:
        seconds = _span_seconds(entry.start_time, entry.end_time)
    else:
        return ZERO
    return seconds if seconds > ZERO else ZERO


def _span_seconds(start: datetime, end: datetime) -> Decimal:
    if (start.tzinfo is None) != (end.tzinfo is None):
        zone = start.tzinfo or end.tzinfo
        start = start if start.tzinfo else start.replace(tzinfo=zone)
        end = end if end.tzinfo else end.replace(tzinfo=zone)
    return to_decimal((end - start).total_seconds())


def _usable_rate(value: Any) -> Decimal | None:
    rate = to_decimal(value)
    return rate if rate > ZERO else None


def effective_rate(entry: TimeEntry, default_hourly_rate: Any = None) -> Decimal:
    """Hourly rate for an entry: override, project, default, else 0."""
    project_rate = entry.project.hourly_rate if entry.project else None
    for candidate in (entry.hourly_rate, project_rate, default_hourly_rate):
        rate = _usable_rate(candidate)
        if rate is not None:
            return rate
    return ZERO


def entry_earnings(entry: TimeEntry, default_hourly_rate: Any = None) -> Decimal:
    """Earnings of a single entry (0 for non-billable entries)."""
    if not entry.is_billable:
        return ZERO
    hours = seconds_to_hours(effective_duration_seconds(entry))
    return hours * effective_rate(entry, default_hourly_rate)


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------


@dataclass
class EntryTotals:
    """
    Running totals for a bucket of entries.

    Engines create one per bucket, ``add`` entries to it, then copy the
    derived properties into frozen result objects.
    """

    total_seconds: Decimal = ZERO
    billable_seconds: Decimal = ZERO
    earnings: Decimal = ZERO
    sessions: int = 0
    billable_sessions: int = 0

    def add(self, entry: TimeEntry, default_hourly_rate: Any = None) -> None:
        seconds = effective_duration_seconds(entry)
        self.total_seconds += seconds
        self.sessions += 1
        if entry.is_billable:
            self.billable_seconds += seconds
            self.billable_sessions += 1
            self.earnings += seconds_to_hours(seconds) * effective_rate(
                entry, default_hourly_rate
            )

    @property
    def total_hours(self) -> Decimal:
        return seconds_to_hours(self.total_seconds)

    @property
    def billable_hours(self) -> Decimal:
        return seconds_to_hours(self.billable_seconds)

    @property
    def productivity_score(self) -> Decimal:
        """Billable share of tracked time, as a percentage."""
        return safe_percentage(self.billable_seconds, self.total_seconds)

    @property
    def average_hourly_rate(self) -> Decimal:
        return safe_ratio(self.earnings, self.billable_hours)

    @property
    def average_session_seconds(self) -> Decimal:
        return safe_ratio(self.total_seconds, Decimal(self.sessions))


def sum_entries(
    entries: Iterable[TimeEntry],
    default_hourly_rate: Any = None,
) -> EntryTotals:
    """Accumulate ``entries`` into a fresh ``EntryTotals``."""
    totals = EntryTotals()
    for entry in entries:
        totals.add(entry, default_hourly_rate)
    return totals
