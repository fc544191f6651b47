"""Tests for the report service."""

from datetime import date, datetime
from typing import Callable

import pytest  # type: ignore[import-not-found]

from time_ledger.analysis.cache import ReportCache
from time_ledger.analysis.periods import Period
from time_ledger.analysis.productivity import ProductivityTrend
from time_ledger.analysis.service import ReportService
from time_ledger.core.models import Snapshot, TimeEntry

ONE_HOUR = 3_600_000


@pytest.fixture  # type: ignore[misc]
def service(snapshot: Snapshot) -> ReportService:
    return ReportService(snapshot, "monday")


class TestReportServiceInit:
    def test_invalid_first_day_of_week(self, snapshot: Snapshot) -> None:
        with pytest.raises(ValueError):
            ReportService(snapshot, "caturday")

    def test_first_day_is_normalized(self, snapshot: Snapshot) -> None:
        assert ReportService(snapshot, " Sunday").first_day_of_week == "sunday"


class TestSummary:
    """Test the summary report."""

    def test_summary_30days(self, service: ReportService, now: datetime) -> None:
        report = service.summary("30days", now)

        assert report.period is Period.LAST_30_DAYS
        assert report.has_data
        assert report.totals.entries_found == 4
        assert report.totals.total_earnings == 180.0
        assert len(report.series) == len(report.labels) == 30
        assert report.chart_max == 100.0
        assert report.trend == ProductivityTrend(67, 67, True)
        assert [r.name for r in report.projects] == ["Website", "Mobile App", "Internal"]
        assert [r.name for r in report.clients] == ["Acme", "Beta Corp", "Idle Ltd"]
        assert report.weekly_labels[0] == "Mon"
        assert report.weekly_earnings == [0, 80.0, 100.0, 0, 0, 0, 0]

    def test_summary_without_data(self, now: datetime) -> None:
        report = ReportService(Snapshot()).summary("quarter", now)
        assert not report.has_data
        assert report.series == [0] * 13
        assert report.chart_max == 1
        assert report.trend.has_data is False

    def test_unknown_period(self, service: ReportService, now: datetime) -> None:
        with pytest.raises(ValueError, match="Unknown period"):
            service.summary("forever", now)

    def test_summary_is_cached(self, snapshot: Snapshot, now: datetime) -> None:
        cache = ReportCache()
        first = ReportService(snapshot, cache=cache).summary("year", now)
        second = ReportService(snapshot, cache=cache).summary("year", now)
        assert first is second
        assert cache.hits == 1

    def test_new_snapshot_misses_cache(
        self,
        snapshot: Snapshot,
        make_entry: Callable[..., TimeEntry],
        now: datetime,
    ) -> None:
        cache = ReportCache()
        before = ReportService(snapshot, cache=cache).summary("30days", now)
        changed = Snapshot.of(
            snapshot.entries + (make_entry(now.replace(hour=11), 1.0, "p1", True),),
            snapshot.projects,
            snapshot.clients,
            snapshot.users,
        )
        after = ReportService(changed, cache=cache).summary("30days", now)
        assert after.totals.total_earnings == before.totals.total_earnings + 50.0
        assert cache.hits == 0

    def test_first_day_of_week_keys_cache(self, snapshot: Snapshot, now: datetime) -> None:
        cache = ReportCache()
        monday = ReportService(snapshot, "monday", cache).summary("week", now)
        sunday = ReportService(snapshot, "sunday", cache).summary("week", now)
        assert monday.totals.entries_found == 2
        assert sunday.totals.entries_found == 3


class TestSeriesAndTrend:
    def test_series(self, service: ReportService, now: datetime) -> None:
        labels, values = service.series("30days", "earnings", now)
        assert labels[-1] == "Nov 19"
        assert values[-1] == 100.0

    def test_series_duration(self, service: ReportService, now: datetime) -> None:
        labels, values = service.series("week", "duration", now)
        assert labels == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert values[2] == 2 * ONE_HOUR

    def test_trend(self, service: ReportService, now: datetime) -> None:
        assert service.trend("year", now).percentage == 82


class TestGroupedReports:
    def test_projects(self, service: ReportService, now: datetime) -> None:
        rows = service.projects("quarter", now)
        assert rows[0].name == "Website"

    def test_clients(self, service: ReportService, now: datetime) -> None:
        rows = service.clients("year", now)
        assert rows[0].total_earnings == 380.0

    def test_team(self, service: ReportService, now: datetime) -> None:
        assert [r.name for r in service.team("all", now)] == ["adam", "Zoe"]

    def test_compare(self, service: ReportService, now: datetime) -> None:
        rows = service.compare("clients", date(2025, 11, 1), None, now)
        assert [r.name for r in rows] == ["Acme", "Beta Corp"]


class TestDetailed:
    def test_newest_first(self, service: ReportService, now: datetime) -> None:
        report = service.detailed(now=now)
        starts = [e.start_time for e in report.entries]
        assert starts == sorted(starts, reverse=True)
        assert report.totals.entries_found == 5

    def test_filters(self, service: ReportService, now: datetime) -> None:
        report = service.detailed(client_id="c1", billable="billable", now=now)
        assert report.totals.entries_found == 3
        assert report.totals.total_earnings == 380.0


class TestWeekAndToday:
    def test_week(self, service: ReportService, now: datetime) -> None:
        report = service.week(now)
        assert len(report.labels) == len(report.durations) == len(report.earnings) == 7
        assert report.durations[1] == ONE_HOUR
        assert report.earnings[2] == 100.0

    def test_today(self, service: ReportService, now: datetime) -> None:
        stats = service.today(now)
        assert stats.entries == 1
        assert stats.earnings == 100.0
