"""
Analytics result snapshots.

Every type here is a frozen dataclass produced from scratch by the engines
on each computation.  Hours, money, rates and percentages are ``Decimal``.
``AnalyticsResult.to_dict()`` gives the presentation layer a JSON-friendly
view (Decimals as strings, dates as ISO-8601).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from tracker_kernel.domain.entries import TimeEntry
from tracker_kernel.domain.filters import ResolvedRange

DAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


@dataclass(frozen=True)
class SentinelLabels:
    """Display names for groups whose project or client linkage is missing."""

    unknown_project: str = "Unknown Project"
    unknown_client: str = "Unknown Client"
    no_client: str = "No Client"


DEFAULT_LABELS = SentinelLabels()


# ---------------------------------------------------------------------------
# Productivity series
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DailyAverage:
    """Weekday bucket (0=Sunday .. 6=Saturday) over the filtered entries."""

    day_of_week: int
    day_name: str
    average_hours: Decimal
    average_sessions: int
    productivity_score: Decimal


@dataclass(frozen=True)
class WeeklyTrend:
    """One calendar week of the rolling trend window."""

    week_start: date
    total_hours: Decimal
    billable_hours: Decimal
    earnings: Decimal
    sessions_count: int
    productivity_score: Decimal


@dataclass(frozen=True)
class MonthlyComparison:
    """One calendar month of the rolling comparison window."""

    month: str  # "Jan" .. "Dec"
    year: int
    month_start: date
    total_hours: Decimal
    billable_hours: Decimal
    earnings: Decimal
    projects_worked: int
    average_hourly_rate: Decimal
    growth_rate: Decimal


@dataclass(frozen=True)
class ProductivityMetrics:
    """
    Aggregate productivity snapshot.

    Guarantees:
        - ``billable_hours <= total_hours``.
        - ``productivity_rate`` is 0 when ``total_hours`` is 0.
        - ``daily_averages`` has 7 elements, ``weekly_trends`` 8 and
          ``monthly_comparison`` 6, oldest first for the latter two.
    """

    total_hours: Decimal
    billable_hours: Decimal
    productivity_rate: Decimal
    average_session_length: Decimal
    peak_productivity_hours: tuple[int, ...]
    daily_averages: tuple[DailyAverage, ...]
    weekly_trends: tuple[WeeklyTrend, ...]
    monthly_comparison: tuple[MonthlyComparison, ...]


# ---------------------------------------------------------------------------
# Rollups
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeDistribution:
    """Hours worked on one local date; ``productivity`` is hours per session."""

    date: date
    hours: Decimal
    sessions: int
    productivity: Decimal


@dataclass(frozen=True)
class ProjectAnalytics:
    """Rollup of all filtered entries sharing a project.

    ``budget_utilization`` is ``None`` when the project has no budget,
    which is distinct from a budget that is 0% used.
    """

    project_id: str
    project_name: str
    client_id: str | None
    client_name: str | None
    total_hours: Decimal
    billable_hours: Decimal
    earnings: Decimal
    profitability: Decimal
    average_hourly_rate: Decimal
    time_distribution: tuple[TimeDistribution, ...]
    completion_rate: Decimal
    budget_utilization: Decimal | None = None


@dataclass(frozen=True)
class ClientAnalytics:
    """Rollup of all filtered entries sharing a client.

    ``client_id`` is ``None`` for the combined "No Client" bucket.
    """

    client_id: str | None
    client_name: str
    total_hours: Decimal
    billable_hours: Decimal
    earnings: Decimal
    projects_count: int
    average_project_value: Decimal
    projects: tuple[ProjectAnalytics, ...]


@dataclass(frozen=True)
class TimePattern:
    """Hour-of-day bucket.

    ``average_productivity`` is the share of *entries* that are billable
    (a count ratio), unlike peak hours which weight by duration.
    """

    hour: int
    average_productivity: Decimal
    total_sessions: int
    average_session_length: Decimal


# ---------------------------------------------------------------------------
# Composed result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalyticsResult:
    """Everything the dashboard needs for one (entries, filter, rate) input."""

    range: ResolvedRange
    metrics: ProductivityMetrics
    projects: tuple[ProjectAnalytics, ...]
    clients: tuple[ClientAnalytics, ...]
    hourly_patterns: tuple[TimePattern, ...]
    filtered_entries: tuple[TimeEntry, ...] = ()

    @property
    def total_earnings(self) -> Decimal:
        return sum((p.earnings for p in self.projects), Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view; filtered entries are summarized by count."""
        return {
            "range": _plain(self.range),
            "metrics": _plain(self.metrics),
            "projects": _plain(self.projects),
            "clients": _plain(self.clients),
            "hourly_patterns": _plain(self.hourly_patterns),
            "filtered_entry_count": len(self.filtered_entries),
        }


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _plain(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
