"""
Module: tracker_engines.report_stats
Responsibility:
    Statistics behind the reports screen: entries grouped by date, project
    name and client name, per-group totals, daily productivity, and the
    report summary card.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Durations are reported in seconds (the reports screen formats them
      with ``tracker_engines.durations``); money in Decimal.
    - Project and client stats are sorted by tracked time, most first;
      daily productivity is sorted by date, oldest first.
    - ``productivity_ratio`` is a 0..1 fraction (not a percentage) and is
      0 for days without tracked time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timezone, tzinfo
from decimal import Decimal
from typing import Any, Iterable, Sequence

from tracker_kernel.domain.analytics import DEFAULT_LABELS, SentinelLabels
from tracker_kernel.domain.entries import TimeEntry
from tracker_kernel.domain.filters import ResolvedRange
from tracker_engines.earnings import safe_ratio, sum_entries, to_local
from tracker_engines.tracer import traced_engine


@dataclass(frozen=True)
class ProjectStats:
    project_name: str
    total_seconds: Decimal
    billable_seconds: Decimal
    total_earnings: Decimal
    entry_count: int
    average_session_length: Decimal  # seconds


@dataclass(frozen=True)
class ClientStats:
    client_name: str
    total_seconds: Decimal
    billable_seconds: Decimal
    total_earnings: Decimal
    entry_count: int
    project_count: int
    average_session_length: Decimal  # seconds


@dataclass(frozen=True)
class DailyProductivity:
    date: date
    total_seconds: Decimal
    billable_seconds: Decimal
    total_earnings: Decimal
    entry_count: int
    productivity_ratio: Decimal


@dataclass(frozen=True)
class ReportSummary:
    """Headline numbers for a report period."""

    total_seconds: Decimal
    billable_seconds: Decimal
    total_earnings: Decimal
    average_hourly_rate: Decimal
    unique_projects: int
    unique_clients: int
    entry_count: int


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------


def filter_entries_by_range(
    entries: Iterable[TimeEntry],
    resolved_range: ResolvedRange,
    tz: tzinfo = timezone.utc,
) -> tuple[TimeEntry, ...]:
    """Entries whose local start falls inside ``resolved_range``."""
    return tuple(
        e for e in entries if resolved_range.contains(to_local(e.start_time, tz))
    )


def group_entries_by_date(
    entries: Iterable[TimeEntry],
    tz: tzinfo = timezone.utc,
) -> dict[date, list[TimeEntry]]:
    groups: dict[date, list[TimeEntry]] = {}
    for entry in entries:
        groups.setdefault(to_local(entry.start_time, tz).date(), []).append(entry)
    return groups


def group_entries_by_project(
    entries: Iterable[TimeEntry],
    labels: SentinelLabels = DEFAULT_LABELS,
) -> dict[str, list[TimeEntry]]:
    """Group by project *name*; entries without a named project share one group."""
    groups: dict[str, list[TimeEntry]] = {}
    for entry in entries:
        name = entry.project.name if entry.project and entry.project.name else None
        groups.setdefault(name or labels.unknown_project, []).append(entry)
    return groups


def group_entries_by_client(
    entries: Iterable[TimeEntry],
    labels: SentinelLabels = DEFAULT_LABELS,
) -> dict[str, list[TimeEntry]]:
    """Group by client *name*; entries without a named client share one group."""
    groups: dict[str, list[TimeEntry]] = {}
    for entry in entries:
        client = entry.project.client if entry.project else None
        name = client.name if client and client.name else labels.no_client
        groups.setdefault(name, []).append(entry)
    return groups


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


@traced_engine("project_stats", "1.0", fingerprint_fields=("default_hourly_rate",))
def calculate_project_stats(
    entries: Sequence[TimeEntry],
    default_hourly_rate: Any = None,
    labels: SentinelLabels = DEFAULT_LABELS,
) -> tuple[ProjectStats, ...]:
    stats = []
    for name, group in group_entries_by_project(entries, labels).items():
        totals = sum_entries(group, default_hourly_rate)
        stats.append(
            ProjectStats(
                project_name=name,
                total_seconds=totals.total_seconds,
                billable_seconds=totals.billable_seconds,
                total_earnings=totals.earnings,
                entry_count=totals.sessions,
                average_session_length=totals.average_session_seconds,
            )
        )
    return tuple(sorted(stats, key=lambda s: s.total_seconds, reverse=True))


@traced_engine("client_stats", "1.0", fingerprint_fields=("default_hourly_rate",))
def calculate_client_stats(
    entries: Sequence[TimeEntry],
    default_hourly_rate: Any = None,
    labels: SentinelLabels = DEFAULT_LABELS,
) -> tuple[ClientStats, ...]:
    stats = []
    for name, group in group_entries_by_client(entries, labels).items():
        totals = sum_entries(group, default_hourly_rate)
        stats.append(
            ClientStats(
                client_name=name,
                total_seconds=totals.total_seconds,
                billable_seconds=totals.billable_seconds,
                total_earnings=totals.earnings,
                entry_count=totals.sessions,
                project_count=len({e.project_id for e in group}),
                average_session_length=totals.average_session_seconds,
            )
        )
    return tuple(sorted(stats, key=lambda s: s.total_seconds, reverse=True))


@traced_engine("daily_productivity", "1.0", fingerprint_fields=("tz",))
def calculate_daily_productivity(
    entries: Sequence[TimeEntry],
    tz: tzinfo = timezone.utc,
    default_hourly_rate: Any = None,
) -> tuple[DailyProductivity, ...]:
    days = []
    for day, group in sorted(group_entries_by_date(entries, tz).items()):
        totals = sum_entries(group, default_hourly_rate)
        days.append(
            DailyProductivity(
                date=day,
                total_seconds=totals.total_seconds,
                billable_seconds=totals.billable_seconds,
                total_earnings=totals.earnings,
                entry_count=totals.sessions,
                productivity_ratio=safe_ratio(
                    totals.billable_seconds, totals.total_seconds
                ),
            )
        )
    return tuple(days)


@traced_engine("report_summary", "1.0", fingerprint_fields=("default_hourly_rate",))
def summarize_report(
    entries: Sequence[TimeEntry],
    default_hourly_rate: Any = None,
) -> ReportSummary:
    totals = sum_entries(entries, default_hourly_rate)
    return ReportSummary(
        total_seconds=totals.total_seconds,
        billable_seconds=totals.billable_seconds,
        total_earnings=totals.earnings,
        average_hourly_rate=totals.average_hourly_rate,
        unique_projects=len({e.project_id for e in entries}),
        unique_clients=len({e.client_id for e in entries if e.client_id}),
        entry_count=totals.sessions,
    )
