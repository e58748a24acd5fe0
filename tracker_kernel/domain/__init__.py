"""
Pure domain layer.

Immutable value objects with NO dependencies on storage, network or the
system clock (``SystemClock`` is the one sanctioned boundary for time).
"""

from tracker_kernel.domain.analytics import (
    DAY_NAMES,
    DEFAULT_LABELS,
    AnalyticsResult,
    ClientAnalytics,
    DailyAverage,
    MonthlyComparison,
    ProductivityMetrics,
    ProjectAnalytics,
    SentinelLabels,
    TimeDistribution,
    TimePattern,
    WeeklyTrend,
)
from tracker_kernel.domain.clock import (
    Clock,
    DeterministicClock,
    SequentialClock,
    SystemClock,
)
from tracker_kernel.domain.entries import Client, Project, ProjectStatus, TimeEntry
from tracker_kernel.domain.filters import (
    AnalyticsFilter,
    DateRangePreset,
    ResolvedRange,
)

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SequentialClock",
    "SystemClock",
    # Entries
    "Client",
    "Project",
    "ProjectStatus",
    "TimeEntry",
    # Filters
    "AnalyticsFilter",
    "DateRangePreset",
    "ResolvedRange",
    # Results
    "DAY_NAMES",
    "DEFAULT_LABELS",
    "AnalyticsResult",
    "ClientAnalytics",
    "DailyAverage",
    "MonthlyComparison",
    "ProductivityMetrics",
    "ProjectAnalytics",
    "SentinelLabels",
    "TimeDistribution",
    "TimePattern",
    "WeeklyTrend",
]
