"""
Module: tracker_engines.productivity
Responsibility:
    Compute the productivity snapshot: totals, productivity rate, average
    session length, peak hours, weekday buckets, the rolling 8-week trend
    and the rolling 6-month comparison.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no clock reads.

Invariants enforced:
    - ``productivity_rate`` and every per-bucket ``productivity_score`` are
      0 when the bucket has no tracked time.
    - Exactly 7 weekday buckets (0=Sunday), zero-filled.
    - Exactly 8 weekly and 6 monthly elements, oldest first, computed from
      the *unfiltered* entry collection regardless of the active filter.
    - Peak hours: top 3 local hours by summed duration, ties broken by the
      lower hour.
    - Month-over-month growth is 0 for the first month and whenever the
      previous month earned nothing.

Usage:
    from tracker_engines.productivity import calculate_productivity_metrics

    metrics = calculate_productivity_metrics(
        filtered, all_entries, now=clock.now(), tz=ZoneInfo("UTC"),
        default_hourly_rate=Decimal("75"),
    )
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Any, Sequence

from tracker_kernel.domain.analytics import (
    DAY_NAMES,
    DailyAverage,
    MonthlyComparison,
    ProductivityMetrics,
    WeeklyTrend,
)
from tracker_kernel.domain.entries import TimeEntry
from tracker_kernel.domain.filters import ResolvedRange
from tracker_kernel.logging_config import get_logger
from tracker_engines.date_ranges import (
    MONTHLY_COMPARISON_MONTHS,
    WEEKLY_TREND_WEEKS,
    recent_month_windows,
    recent_week_windows,
    sunday_based_weekday,
)
from tracker_engines.earnings import (
    HUNDRED,
    ZERO,
    EntryTotals,
    effective_duration_seconds,
    safe_ratio,
    seconds_to_hours,
    sum_entries,
    to_local,
)
from tracker_engines.tracer import traced_engine

logger = get_logger("engines.productivity")

PEAK_HOURS_COUNT = 3

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def month_over_month_growth(previous_earnings: Decimal, earnings: Decimal) -> Decimal:
    """Percent change vs. the previous month; 0 when the previous month earned nothing."""
    if previous_earnings <= ZERO:
        return ZERO
    return (earnings - previous_earnings) / previous_earnings * HUNDRED


def calculate_peak_hours(
    entries: Sequence[TimeEntry],
    tz: tzinfo,
    count: int = PEAK_HOURS_COUNT,
) -> tuple[int, ...]:
    """Local start hours with the most tracked time, busiest first."""
    seconds_by_hour: dict[int, Decimal] = defaultdict(Decimal)
    for entry in entries:
        hour = to_local(entry.start_time, tz).hour
        seconds_by_hour[hour] += effective_duration_seconds(entry)

    # Ascending hours first so the stable sort breaks ties by lower hour.
    ranked = sorted(sorted(seconds_by_hour), key=lambda h: seconds_by_hour[h], reverse=True)
    return tuple(ranked[:count])


def calculate_daily_averages(
    entries: Sequence[TimeEntry],
    tz: tzinfo,
) -> tuple[DailyAverage, ...]:
    """One bucket per weekday, Sunday first, zero-filled."""
    buckets = [EntryTotals() for _ in DAY_NAMES]
    for entry in entries:
        buckets[sunday_based_weekday(to_local(entry.start_time, tz))].add(entry)

    return tuple(
        DailyAverage(
            day_of_week=day,
            day_name=DAY_NAMES[day],
            average_hours=totals.total_hours,
            average_sessions=totals.sessions,
            productivity_score=totals.productivity_score,
        )
        for day, totals in enumerate(buckets)
    )


def _entries_in_window(
    entries: Sequence[TimeEntry],
    window: ResolvedRange,
    tz: tzinfo,
) -> list[TimeEntry]:
    return [e for e in entries if window.contains(to_local(e.start_time, tz))]


def calculate_weekly_trends(
    entries: Sequence[TimeEntry],
    now: datetime,
    tz: tzinfo,
    default_hourly_rate: Any = None,
    week_starts_on: int = 0,
) -> tuple[WeeklyTrend, ...]:
    """The 8 most recent calendar weeks, oldest first."""
    trends = []
    for window in recent_week_windows(now, tz, WEEKLY_TREND_WEEKS, week_starts_on):
        totals = sum_entries(_entries_in_window(entries, window, tz), default_hourly_rate)
        trends.append(
            WeeklyTrend(
                week_start=window.start.date(),
                total_hours=totals.total_hours,
                billable_hours=totals.billable_hours,
                earnings=totals.earnings,
                sessions_count=totals.sessions,
                productivity_score=totals.productivity_score,
            )
        )
    return tuple(trends)


def calculate_monthly_comparison(
    entries: Sequence[TimeEntry],
    now: datetime,
    tz: tzinfo,
    default_hourly_rate: Any = None,
) -> tuple[MonthlyComparison, ...]:
    """The 6 most recent calendar months, oldest first, with growth rates."""
    months: list[MonthlyComparison] = []
    for window in recent_month_windows(now, tz, MONTHLY_COMPARISON_MONTHS):
        month_entries = _entries_in_window(entries, window, tz)
        totals = sum_entries(month_entries, default_hourly_rate)
        growth = (
            month_over_month_growth(months[-1].earnings, totals.earnings)
            if months
            else ZERO
        )
        months.append(
            MonthlyComparison(
                month=MONTH_ABBREVIATIONS[window.start.month - 1],
                year=window.start.year,
                month_start=window.start.date(),
                total_hours=totals.total_hours,
                billable_hours=totals.billable_hours,
                earnings=totals.earnings,
                projects_worked=len({e.project_id for e in month_entries}),
                average_hourly_rate=totals.average_hourly_rate,
                growth_rate=growth,
            )
        )
    return tuple(months)


@traced_engine(
    "productivity",
    "1.0",
    fingerprint_fields=("now", "tz", "default_hourly_rate", "week_starts_on"),
)
def calculate_productivity_metrics(
    filtered_entries: Sequence[TimeEntry],
    all_entries: Sequence[TimeEntry],
    now: datetime,
    tz: tzinfo,
    default_hourly_rate: Any = None,
    week_starts_on: int = 0,
) -> ProductivityMetrics:
    """Productivity snapshot.

    Totals, peak hours and weekday buckets use ``filtered_entries``; the
    weekly trend and monthly comparison use ``all_entries``.
    """
    totals = sum_entries(filtered_entries, default_hourly_rate)

    metrics = ProductivityMetrics(
        total_hours=totals.total_hours,
        billable_hours=totals.billable_hours,
        productivity_rate=totals.productivity_score,
        average_session_length=seconds_to_hours(
            safe_ratio(totals.total_seconds, Decimal(totals.sessions))
        ),
        peak_productivity_hours=calculate_peak_hours(filtered_entries, tz),
        daily_averages=calculate_daily_averages(filtered_entries, tz),
        weekly_trends=calculate_weekly_trends(
            all_entries, now, tz, default_hourly_rate, week_starts_on
        ),
        monthly_comparison=calculate_monthly_comparison(
            all_entries, now, tz, default_hourly_rate
        ),
    )
    logger.debug(
        "productivity_calculated",
        extra={
            "entry_count": totals.sessions,
            "total_hours": metrics.total_hours,
            "productivity_rate": metrics.productivity_rate,
        },
    )
    return metrics
