"""
Module: tracker_engines.hourly_patterns
Responsibility:
    Hour-of-day histogram of the filtered entries.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Sparse: only local hours with at least one entry, ascending.
    - ``average_productivity`` is the share of entries in the hour that are
      billable (a count ratio), unlike the duration-weighted peak hours.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import timezone, tzinfo
from decimal import Decimal
from typing import Sequence

from tracker_kernel.domain.analytics import TimePattern
from tracker_kernel.domain.entries import TimeEntry
from tracker_engines.earnings import (
    EntryTotals,
    safe_percentage,
    seconds_to_hours,
    to_local,
)
from tracker_engines.tracer import traced_engine


@traced_engine("hourly_patterns", "1.0", fingerprint_fields=("tz",))
def calculate_hourly_patterns(
    entries: Sequence[TimeEntry],
    tz: tzinfo = timezone.utc,
) -> tuple[TimePattern, ...]:
    by_hour: dict[int, EntryTotals] = defaultdict(EntryTotals)
    for entry in entries:
        by_hour[to_local(entry.start_time, tz).hour].add(entry)

    return tuple(
        TimePattern(
            hour=hour,
            average_productivity=safe_percentage(
                Decimal(totals.billable_sessions), Decimal(totals.sessions)
            ),
            total_sessions=totals.sessions,
            average_session_length=seconds_to_hours(totals.average_session_seconds),
        )
        for hour, totals in sorted(by_hour.items())
    )
