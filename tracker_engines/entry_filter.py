"""
Module: tracker_engines.entry_filter
Responsibility:
    Apply an ``AnalyticsFilter`` to the entry collection.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - An entry passes only if every active predicate holds: start time in
      the inclusive range, project membership, client membership (via the
      joined project), and billability when non-billable entries are
      excluded.
    - Input order is preserved, so downstream tie-breaking is stable.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import Iterable

from tracker_kernel.domain.entries import TimeEntry
from tracker_kernel.domain.filters import AnalyticsFilter, ResolvedRange
from tracker_kernel.logging_config import get_logger
from tracker_engines.earnings import to_local
from tracker_engines.tracer import traced_engine

logger = get_logger("engines.entry_filter")


def entry_matches(
    entry: TimeEntry,
    resolved_range: ResolvedRange,
    analytics_filter: AnalyticsFilter,
    tz: tzinfo,
) -> bool:
    """Predicate for a single entry."""
    if not resolved_range.contains(to_local(entry.start_time, tz)):
        return False
    if analytics_filter.project_ids and entry.project_id not in analytics_filter.project_ids:
        return False
    if analytics_filter.client_ids:
        client_id = entry.client_id
        if client_id is None or client_id not in analytics_filter.client_ids:
            return False
    if not analytics_filter.include_non_billable and not entry.is_billable:
        return False
    return True


@traced_engine("entry_filter", "1.0", fingerprint_fields=("resolved_range", "analytics_filter"))
def filter_entries(
    entries: Iterable[TimeEntry],
    resolved_range: ResolvedRange,
    analytics_filter: AnalyticsFilter,
    tz: tzinfo,
) -> tuple[TimeEntry, ...]:
    """Entries that satisfy the filter, in input order."""
    if resolved_range.is_empty:
        return ()
    matched = tuple(
        entry
        for entry in entries
        if entry_matches(entry, resolved_range, analytics_filter, tz)
    )
    logger.debug("entries_filtered", extra={"matched": len(matched)})
    return matched
