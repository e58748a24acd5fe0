"""
Hypothesis-based property tests for the analytics pipeline.

Random entry collections (including negative, non-finite and missing
durations, junk rates, missing project or client linkage) are pushed
through AnalyticsService and the invariants below must hold for every
filter preset:

- billable_hours <= total_hours, 0 <= productivity_rate <= 100
- 7 weekday buckets, 8 weekly trends, 6 months, regardless of filter
- project hours add up to the total; client hours too (with the
  unassigned bucket enabled)
- hourly pattern sessions add up to the filtered entry count
- identical inputs give equal results
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from tracker_config.schema import AnalyticsSettings
from tracker_engines.earnings import to_decimal
from tracker_kernel.domain.clock import DeterministicClock
from tracker_kernel.domain.entries import Client, Project, TimeEntry
from tracker_kernel.domain.filters import AnalyticsFilter, DateRangePreset
from tracker_services.analytics_service import AnalyticsService

UTC = timezone.utc
NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)
TOLERANCE = Decimal("1e-15")

_ACME = Client(id="c1", name="Acme")
PROJECTS = (
    Project(id="p1", name="Website", client_id="c1", client=_ACME, hourly_rate=100),
    Project(id="p2", name="App", client_id="c1", client=_ACME, hourly_rate=float("nan")),
    Project(id="p3", name="Internal", hourly_rate=-5, budget=500),
    Project(id="p4", name="Legacy", client_id="c404"),
    None,
)

junk_floats = st.one_of(
    st.floats(min_value=-1e6, max_value=1e6),
    st.sampled_from([float("nan"), float("inf"), float("-inf")]),
)
durations = st.one_of(
    st.none(),
    st.integers(min_value=-3600, max_value=12 * 3600),
    junk_floats,
)
rates = st.one_of(
    st.none(),
    st.integers(min_value=-50, max_value=500),
    junk_floats,
)


@composite
def time_entries(draw, index):
    project = draw(st.sampled_from(PROJECTS))
    start = draw(
        st.datetimes(
            min_value=datetime(2023, 9, 1),
            max_value=datetime(2024, 4, 30),
            timezones=st.just(UTC),
        )
    )
    duration = draw(durations)
    closed = draw(st.booleans())
    return TimeEntry(
        id=f"e{index}",
        project_id=project.id if project else "orphan",
        start_time=start,
        end_time=start + timedelta(minutes=draw(st.integers(0, 600))) if closed else None,
        duration_seconds=duration,
        is_billable=draw(st.booleans()),
        hourly_rate=draw(rates),
        project=project,
    )


@composite
def entry_collections(draw):
    size = draw(st.integers(min_value=0, max_value=25))
    return [draw(time_entries(i)) for i in range(size)]


@composite
def analytics_filters(draw):
    preset = draw(st.sampled_from(list(DateRangePreset)))
    return AnalyticsFilter(
        date_range=preset,
        start_date=draw(st.sampled_from([None, "2024-02-01", "2024-03-20", "garbage"])),
        end_date=draw(st.sampled_from([None, "2024-03-10", "2023-12-31"])),
        project_ids=draw(st.sampled_from([(), ("p1",), ("p2", "p3")])),
        client_ids=draw(st.sampled_from([(), ("c1",)])),
        include_non_billable=draw(st.booleans()),
    )


def _service(timezone_name="UTC"):
    return AnalyticsService(
        DeterministicClock(NOW), AnalyticsSettings(timezone=timezone_name)
    )


def _close(a: Decimal, b: Decimal) -> bool:
    return abs(a - b) <= TOLERANCE


class TestAggregationInvariants:
    @given(
        entries=entry_collections(),
        analytics_filter=analytics_filters(),
        timezone_name=st.sampled_from(["UTC", "America/New_York", "Asia/Kolkata"]),
        default_rate=rates,
    )
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_metric_bounds_and_shapes(
        self, entries, analytics_filter, timezone_name, default_rate
    ):
        result = _service(timezone_name).compute(entries, analytics_filter, default_rate)
        metrics = result.metrics

        assert Decimal("0") <= metrics.billable_hours <= metrics.total_hours
        assert Decimal("0") <= metrics.productivity_rate <= Decimal("100")
        assert len(metrics.daily_averages) == 7
        assert len(metrics.weekly_trends) == 8
        assert len(metrics.monthly_comparison) == 6
        assert len(metrics.peak_productivity_hours) <= 3
        assert len(set(metrics.peak_productivity_hours)) == len(metrics.peak_productivity_hours)
        for project in result.projects:
            assert project.earnings >= Decimal("0")
            assert Decimal("0") <= project.completion_rate <= Decimal("100")

    @given(entries=entry_collections(), analytics_filter=analytics_filters())
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_rollups_add_up(self, entries, analytics_filter):
        result = _service().compute(entries, analytics_filter)

        project_hours = sum((p.total_hours for p in result.projects), Decimal("0"))
        client_hours = sum((c.total_hours for c in result.clients), Decimal("0"))
        assert _close(project_hours, result.metrics.total_hours)
        assert _close(client_hours, result.metrics.total_hours)
        assert sum(p.total_sessions for p in result.hourly_patterns) == len(
            result.filtered_entries
        )
        earnings = sorted((p.earnings for p in result.projects), reverse=True)
        assert [p.earnings for p in result.projects] == earnings

    @given(entries=entry_collections(), analytics_filter=analytics_filters())
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_idempotent(self, entries, analytics_filter):
        service = _service()
        assert service.compute(entries, analytics_filter) == service.compute(
            entries, analytics_filter
        )

    @given(entries=entry_collections())
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture])
    def test_trends_independent_of_filter(self, entries):
        service = _service()
        week = service.compute(entries, AnalyticsFilter(date_range=DateRangePreset.WEEK))
        year = service.compute(
            entries,
            AnalyticsFilter(date_range=DateRangePreset.YEAR, include_non_billable=False),
        )

        assert week.metrics.weekly_trends == year.metrics.weekly_trends
        assert week.metrics.monthly_comparison == year.metrics.monthly_comparison


class TestNormalization:
    @given(value=st.one_of(st.floats(allow_nan=True, allow_infinity=True), st.integers(), st.none()))
    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_to_decimal_is_always_finite(self, value):
        assert to_decimal(value).is_finite()
