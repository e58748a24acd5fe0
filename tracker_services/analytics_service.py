"""
tracker_services.analytics_service -- Compose the analytics engines into one result.

Responsibility:
    Resolve the filter's date range against the injected clock, filter the
    entry collection, run every calculator and compose a fresh
    ``AnalyticsResult`` per call.

Architecture position:
    Services -- orchestration over engines + kernel.  The only layer that
    reads the clock or holds settings.

Invariants enforced:
    - Pure with respect to inputs: nothing is cached or mutated between
      calls, so identical (entries, filter, rate, now) give equal results.
    - The weekly trend and the monthly comparison always see the full
      entry collection; everything else sees the filtered entries.
    - ``default_hourly_rate`` falls back to ``settings.default_hourly_rate``.

Failure modes:
    - None during aggregation.  Filter payload errors surface earlier, in
      ``AnalyticsFilter.from_dict``.

Usage:
    from tracker_config import get_active_settings
    from tracker_kernel.domain.clock import SystemClock
    from tracker_services.analytics_service import AnalyticsService

    service = AnalyticsService(SystemClock(), get_active_settings())
    result = service.compute(entries, AnalyticsFilter.from_dict(payload))
"""

from __future__ import annotations

import time
from typing import Any, Sequence

from tracker_config.schema import AnalyticsSettings
from tracker_engines.date_ranges import resolve_date_range
from tracker_engines.entry_filter import filter_entries
from tracker_engines.hourly_patterns import calculate_hourly_patterns
from tracker_engines.productivity import calculate_productivity_metrics
from tracker_engines.rollups import (
    calculate_client_analytics,
    calculate_project_analytics,
)
from tracker_kernel.domain.analytics import AnalyticsResult
from tracker_kernel.domain.clock import Clock, SystemClock
from tracker_kernel.domain.entries import TimeEntry
from tracker_kernel.domain.filters import AnalyticsFilter
from tracker_kernel.logging_config import get_logger

logger = get_logger("services.analytics")


class AnalyticsService:
    """
    Computes dashboard analytics for a collection of time entries.

    Contract:
        Receives a Clock and AnalyticsSettings via constructor injection.
    Guarantees:
        - ``compute`` returns a new ``AnalyticsResult`` on every call.
        - ``compute`` never raises for degenerate data (empty collections,
          inverted ranges, missing linkage, zero hours or budgets).
    Non-goals:
        - Does not fetch or persist entries; the caller supplies them.
    """

    def __init__(self, clock: Clock, settings: AnalyticsSettings):
        self._clock = clock
        self._settings = settings

    @property
    def settings(self) -> AnalyticsSettings:
        return self._settings

    def compute(
        self,
        entries: Sequence[TimeEntry],
        analytics_filter: AnalyticsFilter,
        default_hourly_rate: Any = None,
    ) -> AnalyticsResult:
        settings = self._settings
        tz = settings.tz
        now = self._clock.now()
        if default_hourly_rate is None:
            default_hourly_rate = settings.default_hourly_rate

        t0 = time.monotonic()
        all_entries = tuple(entries)
        resolved = resolve_date_range(
            analytics_filter, now, tz, week_starts_on=settings.week_starts_on
        )
        filtered = filter_entries(all_entries, resolved, analytics_filter, tz)

        metrics = calculate_productivity_metrics(
            filtered,
            all_entries,
            now,
            tz,
            default_hourly_rate=default_hourly_rate,
            week_starts_on=settings.week_starts_on,
        )
        projects = calculate_project_analytics(
            filtered, default_hourly_rate, tz, settings.labels
        )
        clients = calculate_client_analytics(
            filtered,
            projects,
            default_hourly_rate,
            settings.labels,
            include_unassigned=settings.include_unassigned_client_bucket,
        )
        result = AnalyticsResult(
            range=resolved,
            metrics=metrics,
            projects=projects,
            clients=clients,
            hourly_patterns=calculate_hourly_patterns(filtered, tz),
            filtered_entries=filtered,
        )

        logger.info(
            "analytics_computed",
            extra={
                "date_range": analytics_filter.date_range.value,
                "entry_count": len(all_entries),
                "filtered_count": len(filtered),
                "project_count": len(projects),
                "client_count": len(clients),
                "settings_checksum": settings.checksum,
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            },
        )
        return result


def compute_analytics(
    entries: Sequence[TimeEntry],
    analytics_filter: AnalyticsFilter,
    default_hourly_rate: Any = None,
    *,
    clock: Clock | None = None,
    settings: AnalyticsSettings | None = None,
) -> AnalyticsResult:
    """One-shot analytics computation.

    Defaults to the system clock and the bundled default settings.
    """
    if settings is None:
        from tracker_config import get_active_settings

        settings = get_active_settings()
    service = AnalyticsService(clock or SystemClock(), settings)
    return service.compute(entries, analytics_filter, default_hourly_rate)
