"""
Module: tracker_engines.date_ranges
Responsibility:
    Resolve an ``AnalyticsFilter`` date range preset into a concrete
    inclusive interval, and build the calendar windows used by the weekly
    trend, the monthly comparison and the report screens.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  ``now`` and the timezone
    are always passed in; nothing here reads the clock.

Invariants enforced:
    - Windows are computed on the local calendar of ``tz`` (DST-safe: each
      boundary is a local midnight built directly in the zone).
    - Window ends are inclusive: the last microsecond before the next
      window starts.
    - Weekday indices use 0=Sunday .. 6=Saturday.

Failure modes:
    - None.  Unparseable custom bounds fall back to the defaults (current
      month start / now) and are logged; inverted custom ranges are
      returned unchanged and simply match no entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from tracker_kernel.domain.filters import (
    AnalyticsFilter,
    Bound,
    DateRangePreset,
    ResolvedRange,
)
from tracker_kernel.logging_config import get_logger
from tracker_engines.earnings import to_local
from tracker_engines.tracer import traced_engine

logger = get_logger("engines.date_ranges")

_ONE_MICROSECOND = timedelta(microseconds=1)

WEEKLY_TREND_WEEKS = 8
MONTHLY_COMPARISON_MONTHS = 6


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


def sunday_based_weekday(moment: date) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""
    return (moment.weekday() + 1) % 7


def _midnight(day: date, tz: tzinfo) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=tz)


def start_of_day(moment: datetime) -> datetime:
    return _midnight(moment.date(), moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    return _midnight(moment.date() + timedelta(days=1), moment.tzinfo) - _ONE_MICROSECOND


def start_of_week(moment: datetime, week_starts_on: int = 0) -> datetime:
    offset = (sunday_based_weekday(moment) - week_starts_on) % 7
    return _midnight(moment.date() - timedelta(days=offset), moment.tzinfo)


def end_of_week(moment: datetime, week_starts_on: int = 0) -> datetime:
    start = start_of_week(moment, week_starts_on)
    return _midnight(start.date() + timedelta(days=7), moment.tzinfo) - _ONE_MICROSECOND


def shift_months(moment: datetime, months: int) -> datetime:
    """First day of the month ``months`` away from ``moment``'s month."""
    index = moment.year * 12 + (moment.month - 1) + months
    return datetime(index // 12, index % 12 + 1, 1, tzinfo=moment.tzinfo)


def start_of_month(moment: datetime) -> datetime:
    return shift_months(moment, 0)


def end_of_month(moment: datetime) -> datetime:
    return shift_months(moment, 1) - _ONE_MICROSECOND


def start_of_quarter(moment: datetime) -> datetime:
    first_month = ((moment.month - 1) // 3) * 3 + 1
    return datetime(moment.year, first_month, 1, tzinfo=moment.tzinfo)


def end_of_quarter(moment: datetime) -> datetime:
    return shift_months(start_of_quarter(moment), 3) - _ONE_MICROSECOND


def start_of_year(moment: datetime) -> datetime:
    return datetime(moment.year, 1, 1, tzinfo=moment.tzinfo)


def end_of_year(moment: datetime) -> datetime:
    return datetime(moment.year + 1, 1, 1, tzinfo=moment.tzinfo) - _ONE_MICROSECOND


# ---------------------------------------------------------------------------
# Filter resolution
# ---------------------------------------------------------------------------


def parse_bound(value: Bound | None, tz: tzinfo) -> datetime | None:
    """Interpret a custom bound as a local instant.

    Dates and date-only strings resolve to local midnight; naive datetimes
    are taken as local.  Returns ``None`` for missing or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_local(value, tz)
    if isinstance(value, date):
        return _midnight(value, tz)
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        logger.warning(
            "custom_bound_unparseable",
            extra={"bound": str(value)},
        )
        return None
    return to_local(parsed, tz)


@traced_engine(
    "date_range", "1.0", fingerprint_fields=("analytics_filter", "now", "tz")
)
def resolve_date_range(
    analytics_filter: AnalyticsFilter,
    now: datetime,
    tz: tzinfo,
    week_starts_on: int = 0,
) -> ResolvedRange:
    """Resolve the filter's preset to an inclusive local interval.

    ``week``, ``month``, ``quarter`` and ``year`` cover the calendar period
    containing ``now``.  ``custom`` uses the supplied bounds, defaulting to
    the current month start and ``now``.
    """
    local_now = to_local(now, tz)
    preset = analytics_filter.date_range

    if preset == DateRangePreset.WEEK:
        return ResolvedRange(
            start_of_week(local_now, week_starts_on),
            end_of_week(local_now, week_starts_on),
        )
    if preset == DateRangePreset.QUARTER:
        return ResolvedRange(start_of_quarter(local_now), end_of_quarter(local_now))
    if preset == DateRangePreset.YEAR:
        return ResolvedRange(start_of_year(local_now), end_of_year(local_now))
    if preset == DateRangePreset.CUSTOM:
        start = parse_bound(analytics_filter.start_date, tz)
        end = parse_bound(analytics_filter.end_date, tz)
        resolved = ResolvedRange(
            start if start is not None else start_of_month(local_now),
            end if end is not None else local_now,
        )
        if resolved.is_empty:
            logger.info(
                "custom_range_inverted",
                extra={"start": resolved.start, "end": resolved.end},
            )
        return resolved
    return ResolvedRange(start_of_month(local_now), end_of_month(local_now))


# ---------------------------------------------------------------------------
# Rolling windows
# ---------------------------------------------------------------------------


def recent_week_windows(
    now: datetime,
    tz: tzinfo,
    count: int = WEEKLY_TREND_WEEKS,
    week_starts_on: int = 0,
) -> tuple[ResolvedRange, ...]:
    """The ``count`` most recent calendar weeks, oldest first, ending this week."""
    current = start_of_week(to_local(now, tz), week_starts_on).date()
    windows = []
    for weeks_back in range(count - 1, -1, -1):
        week_start = _midnight(current - timedelta(weeks=weeks_back), tz)
        windows.append(
            ResolvedRange(week_start, end_of_week(week_start, week_starts_on))
        )
    return tuple(windows)


def recent_month_windows(
    now: datetime,
    tz: tzinfo,
    count: int = MONTHLY_COMPARISON_MONTHS,
) -> tuple[ResolvedRange, ...]:
    """The ``count`` most recent calendar months, oldest first, ending this month."""
    local_now = to_local(now, tz)
    windows = []
    for months_back in range(count - 1, -1, -1):
        month_start = shift_months(local_now, -months_back)
        windows.append(ResolvedRange(month_start, end_of_month(month_start)))
    return tuple(windows)


# ---------------------------------------------------------------------------
# Report presets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NamedRange:
    """A labelled report range such as "Last 7 Days"."""

    key: str
    label: str
    range: ResolvedRange


def named_report_ranges(
    now: datetime,
    tz: tzinfo,
    week_starts_on: int = 0,
) -> dict[str, NamedRange]:
    """Ranges offered by the reports screen, keyed by identifier."""
    local_now = to_local(now, tz)
    today_end = end_of_day(local_now)

    def days_back(days: int) -> datetime:
        return start_of_day(local_now - timedelta(days=days))

    ranges = (
        NamedRange("today", "Today", ResolvedRange(start_of_day(local_now), today_end)),
        NamedRange(
            "this_week",
            "This Week",
            ResolvedRange(
                start_of_week(local_now, week_starts_on),
                end_of_week(local_now, week_starts_on),
            ),
        ),
        NamedRange(
            "this_month",
            "This Month",
            ResolvedRange(start_of_month(local_now), end_of_month(local_now)),
        ),
        NamedRange("last_7_days", "Last 7 Days", ResolvedRange(days_back(7), today_end)),
        NamedRange("last_30_days", "Last 30 Days", ResolvedRange(days_back(30), today_end)),
    )
    return {named.key: named for named in ranges}
