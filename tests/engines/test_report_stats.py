"""
Tests for the reports screen statistics.

Covers:
- Grouping by date, project name and client name
- Project and client stats ordering
- Daily productivity ratio
- Report summary
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from tests.conftest import make_client, make_entry, make_project
from tracker_engines.report_stats import (
    calculate_client_stats,
    calculate_daily_productivity,
    calculate_project_stats,
    filter_entries_by_range,
    group_entries_by_client,
    group_entries_by_date,
    group_entries_by_project,
    summarize_report,
)
from tracker_kernel.domain.filters import ResolvedRange

UTC = timezone.utc


def _at(day, hour=10):
    return datetime(2024, 3, day, hour, 0, tzinfo=UTC)


class TestReportStats:
    def setup_method(self):
        acme = make_client("c1", "Acme")
        self.site = make_project("p1", "Website", client=acme, hourly_rate=100)
        self.app = make_project("p2", "App", client=acme, hourly_rate=80)
        self.blog = make_project("p3", "Blog", hourly_rate=20)
        self.entries = [
            make_entry(self.site, _at(4), hours=1),
            make_entry(self.app, _at(4, 14), hours=3),
            make_entry(self.blog, _at(5), hours=2, is_billable=False),
            make_entry(self.site, _at(6), hours=1),
        ]

    def test_group_by_date(self):
        groups = group_entries_by_date(self.entries)
        assert {d.day: len(g) for d, g in groups.items()} == {4: 2, 5: 1, 6: 1}

    def test_group_by_project_name(self):
        groups = group_entries_by_project(self.entries)
        assert list(groups) == ["Website", "App", "Blog"]
        assert len(groups["Website"]) == 2

    def test_group_by_client_name(self):
        groups = group_entries_by_client(self.entries)
        assert {k: len(v) for k, v in groups.items()} == {"Acme": 3, "No Client": 1}

    def test_entries_without_project_share_a_group(self):
        orphans = [make_entry(None, _at(4), project_id="x"), make_entry(None, _at(5), project_id="y")]
        assert list(group_entries_by_project(orphans)) == ["Unknown Project"]

    def test_project_stats_sorted_by_time(self):
        stats = calculate_project_stats(self.entries)

        assert [s.project_name for s in stats] == ["App", "Website", "Blog"]
        website = stats[1]
        assert website.total_seconds == Decimal("7200")
        assert website.total_earnings == Decimal("200")
        assert website.entry_count == 2
        assert website.average_session_length == Decimal("3600")
        assert stats[2].billable_seconds == Decimal("0")

    def test_client_stats(self):
        stats = calculate_client_stats(self.entries)

        assert [s.client_name for s in stats] == ["Acme", "No Client"]
        assert stats[0].project_count == 2
        assert stats[0].total_earnings == Decimal("440")

    def test_daily_productivity(self):
        days = calculate_daily_productivity(self.entries, UTC)

        assert [d.date.day for d in days] == [4, 5, 6]
        assert days[0].productivity_ratio == Decimal("1")
        assert days[1].productivity_ratio == Decimal("0")
        assert days[0].entry_count == 2

    def test_summary(self):
        summary = summarize_report(self.entries)

        assert summary.total_seconds == Decimal("25200")
        assert summary.billable_seconds == Decimal("18000")
        assert summary.total_earnings == Decimal("440")
        assert summary.average_hourly_rate == Decimal("88")
        assert summary.unique_projects == 3
        assert summary.unique_clients == 1
        assert summary.entry_count == 4

    def test_filter_by_range(self):
        window = ResolvedRange(_at(5, 0), _at(6, 0) - timedelta(microseconds=1))
        assert len(filter_entries_by_range(self.entries, window)) == 1

    def test_empty_summary(self):
        summary = summarize_report([])
        assert summary.average_hourly_rate == Decimal("0")
        assert summary.entry_count == 0

    def test_summary_is_traced(self, captured_logs):
        summarize_report(self.entries, default_hourly_rate=Decimal("30"))

        traces = [r for r in captured_logs() if r["message"] == "TRACKER_ENGINE_TRACE"]
        assert [t["engine_name"] for t in traces] == ["report_summary"]
