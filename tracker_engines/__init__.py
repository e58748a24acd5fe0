"""
Module: tracker_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    tracker_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import tracker_kernel (and sibling engine modules).
    MUST NOT import tracker_services or tracker_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      ``now`` and the timezone are explicit parameters.
    - Decimal-only arithmetic in every output.
    - Determinism: identical inputs always produce identical outputs.

Every engine invocation is traced via ``@traced_engine`` (see
``tracker_engines.tracer``), emitting TRACKER_ENGINE_TRACE log records
with engine name, version, input fingerprint and duration.

Usage:
    from tracker_engines.date_ranges import resolve_date_range
    from tracker_engines.productivity import calculate_productivity_metrics
    from tracker_engines.rollups import calculate_project_analytics
    from tracker_engines.invoicing import draft_invoice_from_entries
"""

from tracker_kernel.logging_config import get_logger

logger = get_logger("engines")

from tracker_engines.date_ranges import (
    NamedRange,
    named_report_ranges,
    recent_month_windows,
    recent_week_windows,
    resolve_date_range,
)
from tracker_engines.durations import (
    calculate_earnings,
    format_currency,
    format_duration,
    format_duration_short,
    is_time_overlapping,
    parse_duration,
)
from tracker_engines.earnings import (
    EntryTotals,
    effective_duration_seconds,
    effective_rate,
    entry_earnings,
    sum_entries,
)
from tracker_engines.entry_filter import entry_matches, filter_entries
from tracker_engines.expenses import (
    Expense,
    ExpenseCategoryTotal,
    ExpenseSummary,
    summarize_expenses,
)
from tracker_engines.goals import (
    Goal,
    GoalStatus,
    GoalSummary,
    GoalType,
    goal_progress,
    is_goal_reached,
    measure_goal,
    summarize_goals,
)
from tracker_engines.hourly_patterns import calculate_hourly_patterns
from tracker_engines.invoicing import (
    InvoiceDraft,
    InvoiceLineItem,
    draft_invoice_from_entries,
)
from tracker_engines.productivity import (
    calculate_daily_averages,
    calculate_monthly_comparison,
    calculate_peak_hours,
    calculate_productivity_metrics,
    calculate_weekly_trends,
    month_over_month_growth,
)
from tracker_engines.report_stats import (
    ClientStats,
    DailyProductivity,
    ProjectStats,
    ReportSummary,
    calculate_client_stats,
    calculate_daily_productivity,
    calculate_project_stats,
    summarize_report,
)
from tracker_engines.rollups import (
    calculate_client_analytics,
    calculate_project_analytics,
    calculate_time_distribution,
)
from tracker_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Date ranges
    "NamedRange",
    "named_report_ranges",
    "recent_month_windows",
    "recent_week_windows",
    "resolve_date_range",
    # Durations
    "calculate_earnings",
    "format_currency",
    "format_duration",
    "format_duration_short",
    "is_time_overlapping",
    "parse_duration",
    # Earnings
    "EntryTotals",
    "effective_duration_seconds",
    "effective_rate",
    "entry_earnings",
    "sum_entries",
    # Filtering
    "entry_matches",
    "filter_entries",
    # Expenses
    "Expense",
    "ExpenseCategoryTotal",
    "ExpenseSummary",
    "summarize_expenses",
    # Goals
    "Goal",
    "GoalStatus",
    "GoalSummary",
    "GoalType",
    "goal_progress",
    "is_goal_reached",
    "measure_goal",
    "summarize_goals",
    # Hourly patterns
    "calculate_hourly_patterns",
    # Invoicing
    "InvoiceDraft",
    "InvoiceLineItem",
    "draft_invoice_from_entries",
    # Productivity
    "calculate_daily_averages",
    "calculate_monthly_comparison",
    "calculate_peak_hours",
    "calculate_productivity_metrics",
    "calculate_weekly_trends",
    "month_over_month_growth",
    # Reports
    "ClientStats",
    "DailyProductivity",
    "ProjectStats",
    "ReportSummary",
    "calculate_client_stats",
    "calculate_daily_productivity",
    "calculate_project_stats",
    "summarize_report",
    # Rollups
    "calculate_client_analytics",
    "calculate_project_analytics",
    "calculate_time_distribution",
    # Tracing
    "compute_input_fingerprint",
    "traced_engine",
]
