"""Tests for chart series."""

from datetime import datetime, timedelta
from typing import Callable

import pytest  # type: ignore[import-not-found]

from time_ledger.analysis.earnings import total_earnings
from time_ledger.analysis.periods import filter_by_period
from time_ledger.analysis.series import (
    buckets,
    chart_max,
    labels,
    series,
    weekly_earnings,
    weekly_summary,
)
from time_ledger.core.models import Project, TimeEntry

ONE_HOUR = 3_600_000


class TestBucketLayout:
    """Test bucket counts and labels per period."""

    @pytest.mark.parametrize(  # type: ignore[misc]
        "period,count", [("all", 12), ("year", 12), ("30days", 30), ("quarter", 13), ("week", 7)]
    )
    def test_bucket_counts(self, period: str, count: int, now: datetime) -> None:
        assert len(buckets(period, now)) == count
        assert len(labels(period, now)) == count

    def test_month_labels(self, now: datetime) -> None:
        result = labels("year", now)
        assert result[0] == "Dec"
        assert result[-1] == "Nov"

    def test_day_labels(self, now: datetime) -> None:
        result = labels("30days", now)
        assert result[0] == "Oct 21"
        assert result[-1] == "Nov 19"

    def test_quarter_labels_are_window_starts(self, now: datetime) -> None:
        result = labels("quarter", now)
        assert result[-1] == "Nov 13"
        assert result[0] == "Aug 21"

    def test_week_labels_follow_first_day(self, now: datetime) -> None:
        assert labels("week", now, "monday") == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert labels("week", now, "sunday")[0] == "Sun"

    def test_unknown_period_raises(self, now: datetime) -> None:
        with pytest.raises(ValueError):
            buckets("decade", now)


class TestSeries:
    """Test per-bucket values."""

    def test_empty_30days_is_thirty_zeros(self, projects: list[Project], now: datetime) -> None:
        assert series([], projects, "30days", "monday", now=now) == [0] * 30

    def test_earnings_land_in_start_day(
        self, entries: list[TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        values = series(filter_by_period(entries, "30days", now), projects, "30days", now=now)
        assert values[-1] == 100.0
        assert values[-2] == 80.0
        assert sum(values) == 180.0

    def test_duration_metric(
        self, entries: list[TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        values = series(entries, projects, "30days", metric="duration", now=now)
        assert values[-1] == 2 * ONE_HOUR
        assert values[-4] == ONE_HOUR  # Sunday, non-billable

    def test_productivity_metric(
        self, entries: list[TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        values = series(entries, projects, "30days", metric="productivity", now=now)
        assert values[-1] == 100
        assert values[-4] == 0
        assert all(0 <= v <= 100 for v in values)

    def test_year_buckets_by_month(
        self, entries: list[TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        values = series(entries, projects, "year", now=now)
        assert values[-1] == 180.0  # November
        assert values[5] == 200.0  # May

    def test_entries_outside_buckets_ignored(
        self, make_entry: Callable[..., TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        old = make_entry(now - timedelta(days=400), 1.0)
        assert sum(series([old], projects, "year", now=now)) == 0

    def test_unknown_metric_raises(self, projects: list[Project], now: datetime) -> None:
        with pytest.raises(ValueError):
            series([], projects, "30days", metric="velocity", now=now)


class TestQuarterBuckets:
    """Test that quarter buckets and the quarter filter cover different days."""

    def test_stride_buckets_reach_before_calendar_quarter(
        self, make_entry: Callable[..., TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        """Test an entry from September is charted but not in the quarter filter."""
        september = make_entry(datetime(2025, 9, 1, 10, 0), 1.0, "p1", True)
        assert filter_by_period([september], "quarter", now) == []
        assert sum(series([september], projects, "quarter", now=now)) == 50.0

    def test_quarter_series_of_filtered_entries(
        self, entries: list[TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        filtered = filter_by_period(entries, "quarter", now)
        values = series(filtered, projects, "quarter", now=now)
        assert values[-1] == 180.0  # Nov 13 - Nov 19
        assert len(values) == 13


class TestSeriesTotals:
    """Test month series against the earnings of the filtered entries."""

    def test_year_series_sums_to_filtered_earnings(
        self, entries: list[TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        filtered = filter_by_period(entries, "year", now)
        values = series(filtered, projects, "year", now=now)
        assert sum(values) == total_earnings(filtered, projects) == 380.0

    def test_all_series_only_covers_last_twelve_months(
        self,
        make_entry: Callable[..., TimeEntry],
        entries: list[TimeEntry],
        projects: list[Project],
        now: datetime,
    ) -> None:
        """Test earnings older than twelve months count in totals but not in the chart."""
        old = make_entry(datetime(2024, 6, 3, 10, 0), 2.0, "p1", True)
        filtered = filter_by_period([*entries, old], "all", now)
        values = series(filtered, projects, "all", now=now)

        assert total_earnings(filtered, projects) == 480.0
        assert sum(values) == 380.0
        assert values[0] == 0  # Dec 2024


class TestWeekRotation:
    """Test the first day of week rotates week buckets."""

    def test_sunday_and_monday_are_rotations(
        self, make_entry: Callable[..., TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        # Tuesday through Saturday exist in both weeks
        week = [
            make_entry(datetime(2025, 11, 18, 9, 0), 1.0, "p1", True),
            make_entry(datetime(2025, 11, 19, 9, 0), 2.0, "p2", True),
            make_entry(datetime(2025, 11, 22, 9, 0), 1.0, "p1", True),
        ]
        monday = series(week, projects, "week", "monday", now=now)
        sunday = series(week, projects, "week", "sunday", now=now)

        assert sum(monday) == sum(sunday) == 260.0
        assert sunday[1:] == monday[:-1]
        assert monday[1] == 50.0
        assert sunday[2] == 50.0

    def test_weekly_summary_and_earnings(
        self, entries: list[TimeEntry], projects: list[Project], now: datetime
    ) -> None:
        durations = weekly_summary(entries, "monday", now)
        earnings = weekly_earnings(entries, projects, "monday", now)
        assert durations == [0, ONE_HOUR, 2 * ONE_HOUR, 0, 0, 0, 0]
        assert earnings == [0, 80.0, 100.0, 0, 0, 0, 0]

    def test_invalid_first_day_raises(self, projects: list[Project], now: datetime) -> None:
        with pytest.raises(ValueError):
            series([], projects, "week", "someday", now=now)


class TestChartMax:
    def test_chart_max(self) -> None:
        assert chart_max([3.5, 10.0, 2.0]) == 10.0

    def test_chart_max_never_below_one(self) -> None:
        assert chart_max([]) == 1
        assert chart_max([0, 0, 0]) == 1
        assert chart_max([0.25]) == 1
