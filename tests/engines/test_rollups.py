"""
Tests for project and client rollups.

Covers:
- Project rows: hours, earnings, profitability, average rate
- Budget utilization and completion rate
- Sorting by earnings with stable ties
- Missing project / client linkage
- Client rows, the combined "No Client" bucket, embedded projects
- Per-project daily time distribution
"""

from datetime import datetime, timezone
from decimal import Decimal

from tests.conftest import make_client, make_entry, make_project
from tracker_engines.rollups import (
    calculate_client_analytics,
    calculate_project_analytics,
    calculate_time_distribution,
)
from tracker_kernel.domain.analytics import SentinelLabels
from tracker_kernel.domain.entries import ProjectStatus

UTC = timezone.utc


def _at(day, hour=10):
    return datetime(2024, 3, day, hour, 0, tzinfo=UTC)


class TestProjectRollup:
    def test_scenario_two_projects(self):
        a = make_project("A", "Alpha", hourly_rate=50)
        b = make_project("B", "Beta", hourly_rate=100)
        entries = [
            make_entry(a, _at(4), hours=2),
            make_entry(a, _at(5), hours=1, is_billable=False),
            make_entry(b, _at(6), hours=3),
        ]
        rows = calculate_project_analytics(entries)

        assert [r.project_id for r in rows] == ["B", "A"]
        alpha = rows[1]
        assert alpha.total_hours == Decimal("3")
        assert alpha.billable_hours == Decimal("2")
        assert alpha.earnings == Decimal("100")
        assert alpha.average_hourly_rate == Decimal("50")
        assert alpha.profitability == Decimal("2") / Decimal("3") * 100
        assert rows[0].earnings == Decimal("300")

    def test_ties_keep_first_appearance(self):
        first = make_project("p1", "First")
        second = make_project("p2", "Second")
        entries = [make_entry(second, _at(4)), make_entry(first, _at(5))]

        rows = calculate_project_analytics(entries)
        assert [r.project_id for r in rows] == ["p2", "p1"]

    def test_budget_utilization(self):
        project = make_project(hourly_rate=100, budget=1000)
        rows = calculate_project_analytics([make_entry(project, _at(4), hours=2.5)])

        assert rows[0].budget_utilization == Decimal("25")
        assert rows[0].completion_rate == Decimal("25")

    def test_completion_capped_at_hundred(self):
        project = make_project(hourly_rate=100, budget=100)
        row = calculate_project_analytics([make_entry(project, _at(4), hours=3)])[0]

        assert row.budget_utilization == Decimal("300")
        assert row.completion_rate == Decimal("100")

    def test_completed_project(self):
        project = make_project(status=ProjectStatus.COMPLETED)
        row = calculate_project_analytics([make_entry(project, _at(4))])[0]

        assert row.completion_rate == Decimal("100")
        assert row.budget_utilization is None

    def test_zero_budget_is_no_budget(self):
        project = make_project(hourly_rate=100, budget=0)
        row = calculate_project_analytics([make_entry(project, _at(4))])[0]

        assert row.budget_utilization is None
        assert row.completion_rate == Decimal("0")

    def test_missing_project_metadata(self):
        row = calculate_project_analytics([make_entry(None, _at(4), project_id="ghost")])[0]

        assert row.project_id == "ghost"
        assert row.project_name == "Unknown Project"
        assert row.client_id is None

    def test_custom_labels(self):
        labels = SentinelLabels(unknown_project="(deleted)")
        row = calculate_project_analytics(
            [make_entry(None, _at(4), project_id="ghost")], labels=labels
        )[0]
        assert row.project_name == "(deleted)"

    def test_non_billable_only_project(self):
        project = make_project(hourly_rate=100)
        row = calculate_project_analytics(
            [make_entry(project, _at(4), is_billable=False)]
        )[0]

        assert row.earnings == Decimal("0")
        assert row.average_hourly_rate == Decimal("0")
        assert row.profitability == Decimal("0")

    def test_default_rate_applies(self):
        row = calculate_project_analytics(
            [make_entry(make_project(), _at(4), hours=2)], default_hourly_rate=30
        )[0]
        assert row.earnings == Decimal("60")


class TestTimeDistribution:
    def test_per_day_ascending(self):
        entries = [
            make_entry(start=_at(6), hours=1),
            make_entry(start=_at(4), hours=2),
            make_entry(start=_at(6, 15), hours=2),
        ]
        days = calculate_time_distribution(entries, UTC)

        assert [d.date.day for d in days] == [4, 6]
        assert days[1].hours == Decimal("3")
        assert days[1].sessions == 2
        assert days[1].productivity == Decimal("1.5")


class TestClientRollup:
    def setup_method(self):
        self.acme = make_client("c1", "Acme")
        self.site = make_project("p1", "Website", client=self.acme, hourly_rate=100)
        self.api = make_project("p2", "API", client=self.acme, hourly_rate=50)
        self.internal = make_project("p3", "Internal", hourly_rate=10)
        self.tools = make_project("p4", "Tools", hourly_rate=10)

    def _rollup(self, entries, **kwargs):
        projects = calculate_project_analytics(entries)
        return calculate_client_analytics(entries, projects, **kwargs)

    def test_client_row(self):
        entries = [
            make_entry(self.site, _at(4), hours=2),
            make_entry(self.api, _at(5), hours=2),
        ]
        rows = self._rollup(entries)

        assert len(rows) == 1
        acme = rows[0]
        assert acme.client_id == "c1"
        assert acme.client_name == "Acme"
        assert acme.earnings == Decimal("300")
        assert acme.projects_count == 2
        assert acme.average_project_value == Decimal("150")
        assert [p.project_id for p in acme.projects] == ["p1", "p2"]

    def test_clientless_projects_share_one_bucket(self):
        entries = [
            make_entry(self.internal, _at(4), hours=1),
            make_entry(self.tools, _at(5), hours=2),
        ]
        rows = self._rollup(entries)

        assert len(rows) == 1
        assert rows[0].client_id is None
        assert rows[0].client_name == "No Client"
        assert rows[0].projects_count == 2
        assert rows[0].total_hours == Decimal("3")

    def test_unassigned_bucket_can_be_disabled(self):
        entries = [
            make_entry(self.site, _at(4)),
            make_entry(self.internal, _at(5)),
        ]
        rows = self._rollup(entries, include_unassigned=False)

        assert [r.client_id for r in rows] == ["c1"]

    def test_client_id_without_client_record(self):
        dangling = make_project("p9", "Legacy", client_id="c404")
        rows = self._rollup([make_entry(dangling, _at(4))])

        assert rows[0].client_id == "c404"
        assert rows[0].client_name == "Unknown Client"

    def test_sorted_by_earnings(self):
        entries = [
            make_entry(self.internal, _at(4), hours=1),
            make_entry(self.site, _at(5), hours=1),
        ]
        rows = self._rollup(entries)

        assert [r.client_id for r in rows] == ["c1", None]

    def test_empty(self):
        assert self._rollup([]) == ()
