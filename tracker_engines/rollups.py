"""
Module: tracker_engines.rollups
Responsibility:
    Per-project and per-client rollups of the filtered entries: hours,
    earnings, profitability, average rate, budget utilization, completion
    and a per-project daily time distribution.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Sparse: one row per project/client that has at least one entry.
    - Rows are sorted by earnings, highest first; ties keep the order in
      which the group first appeared in the entry list.
    - ``budget_utilization`` is ``None`` without a positive budget.
    - ``completion_rate`` is 100 for completed projects, else the budget
      utilization capped at 100, else 0.
    - Missing linkage never drops an entry from the project rollup: an
      entry without project metadata is labelled "Unknown Project".
      Entries whose project has no client form one combined "No Client"
      bucket (optional, see ``include_unassigned``).

Failure modes:
    - None.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timezone, tzinfo
from decimal import Decimal
from typing import Any, Sequence

from tracker_kernel.domain.analytics import (
    DEFAULT_LABELS,
    ClientAnalytics,
    ProjectAnalytics,
    SentinelLabels,
    TimeDistribution,
)
from tracker_kernel.domain.entries import Project, TimeEntry
from tracker_kernel.logging_config import get_logger
from tracker_engines.earnings import (
    HUNDRED,
    ZERO,
    EntryTotals,
    safe_percentage,
    safe_ratio,
    sum_entries,
    to_decimal,
    to_local,
)
from tracker_engines.tracer import traced_engine

logger = get_logger("engines.rollups")


def _group_by(entries: Sequence[TimeEntry], key) -> dict[Any, list[TimeEntry]]:
    groups: dict[Any, list[TimeEntry]] = {}
    for entry in entries:
        groups.setdefault(key(entry), []).append(entry)
    return groups


def _joined_project(entries: Sequence[TimeEntry]) -> Project | None:
    return next((e.project for e in entries if e.project is not None), None)


def _budget(project: Project | None) -> Decimal | None:
    if project is None:
        return None
    budget = to_decimal(project.budget)
    return budget if budget > ZERO else None


def calculate_time_distribution(
    entries: Sequence[TimeEntry],
    tz: tzinfo,
) -> tuple[TimeDistribution, ...]:
    """Hours and sessions per local date, oldest date first."""
    by_date: dict[date, EntryTotals] = defaultdict(EntryTotals)
    for entry in entries:
        by_date[to_local(entry.start_time, tz).date()].add(entry)

    return tuple(
        TimeDistribution(
            date=day,
            hours=totals.total_hours,
            sessions=totals.sessions,
            productivity=safe_ratio(totals.total_hours, Decimal(totals.sessions)),
        )
        for day, totals in sorted(by_date.items())
    )


def _project_row(
    project_id: str,
    entries: Sequence[TimeEntry],
    default_hourly_rate: Any,
    tz: tzinfo,
    labels: SentinelLabels,
) -> ProjectAnalytics:
    project = _joined_project(entries)
    totals = sum_entries(entries, default_hourly_rate)
    budget = _budget(project)

    budget_utilization = (
        safe_percentage(totals.earnings, budget) if budget is not None else None
    )
    if project is not None and project.is_completed:
        completion_rate = HUNDRED
    elif budget_utilization is not None:
        completion_rate = min(budget_utilization, HUNDRED)
    else:
        completion_rate = ZERO

    return ProjectAnalytics(
        project_id=project_id,
        project_name=(project.name if project and project.name else labels.unknown_project),
        client_id=project.client_id if project else None,
        client_name=(project.client.name if project and project.client else None),
        total_hours=totals.total_hours,
        billable_hours=totals.billable_hours,
        earnings=totals.earnings,
        profitability=totals.productivity_score,
        average_hourly_rate=totals.average_hourly_rate,
        time_distribution=calculate_time_distribution(entries, tz),
        completion_rate=completion_rate,
        budget_utilization=budget_utilization,
    )


@traced_engine(
    "project_rollup", "1.0", fingerprint_fields=("default_hourly_rate", "tz")
)
def calculate_project_analytics(
    entries: Sequence[TimeEntry],
    default_hourly_rate: Any = None,
    tz: tzinfo = timezone.utc,
    labels: SentinelLabels = DEFAULT_LABELS,
) -> tuple[ProjectAnalytics, ...]:
    """One row per project present in ``entries``, highest earnings first."""
    groups = _group_by(entries, lambda e: e.project_id)
    rows = [
        _project_row(project_id, group, default_hourly_rate, tz, labels)
        for project_id, group in groups.items()
    ]
    return tuple(sorted(rows, key=lambda row: row.earnings, reverse=True))


def _client_name(
    client_id: str | None,
    entries: Sequence[TimeEntry],
    labels: SentinelLabels,
) -> str:
    if client_id is None:
        return labels.no_client
    for entry in entries:
        if entry.project is not None and entry.project.client is not None:
            return entry.project.client.name or labels.unknown_client
    return labels.unknown_client


@traced_engine(
    "client_rollup",
    "1.0",
    fingerprint_fields=("default_hourly_rate", "include_unassigned"),
)
def calculate_client_analytics(
    entries: Sequence[TimeEntry],
    project_analytics: Sequence[ProjectAnalytics],
    default_hourly_rate: Any = None,
    labels: SentinelLabels = DEFAULT_LABELS,
    include_unassigned: bool = True,
) -> tuple[ClientAnalytics, ...]:
    """One row per client present in ``entries``, highest earnings first.

    ``project_analytics`` is the already-sorted project rollup; each client
    row embeds its own projects in that order.
    """
    groups = _group_by(entries, lambda e: e.client_id)
    if not include_unassigned and None in groups:
        dropped = groups.pop(None)
        logger.debug("unassigned_entries_skipped", extra={"count": len(dropped)})

    rows = []
    for client_id, group in groups.items():
        totals = sum_entries(group, default_hourly_rate)
        project_ids = {e.project_id for e in group}
        rows.append(
            ClientAnalytics(
                client_id=client_id,
                client_name=_client_name(client_id, group, labels),
                total_hours=totals.total_hours,
                billable_hours=totals.billable_hours,
                earnings=totals.earnings,
                projects_count=len(project_ids),
                average_project_value=safe_ratio(
                    totals.earnings, Decimal(len(project_ids))
                ),
                projects=tuple(
                    p for p in project_analytics if p.project_id in project_ids
                ),
            )
        )
    return tuple(sorted(rows, key=lambda row: row.earnings, reverse=True))
