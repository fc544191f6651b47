"""Report assembly over a single snapshot."""

import logging
from collections.abc import Hashable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Optional, TypeVar, Union

from time_ledger.analysis.bucketing import DEFAULT_FIRST_DAY_OF_WEEK, day_key, day_offset
from time_ledger.analysis.cache import ReportCache
from time_ledger.analysis.calendar_view import CalendarMonth, calendar_month
from time_ledger.analysis.periods import BillableFilter, Period, filter_by_period, filter_by_range
from time_ledger.analysis.productivity import DailyStats, ProductivityTrend, daily_stats, trend
from time_ledger.analysis.series import (
    SeriesMetric,
    chart_max,
    labels,
    series,
    weekly_earnings,
    weekly_summary,
)
from time_ledger.analysis.summaries import (
    CompareBy,
    EntryTotals,
    SummaryRow,
    by_client,
    by_project,
    by_user,
    compare,
    totals,
)
from time_ledger.core.models import Snapshot, TimeEntry

logger = logging.getLogger(__name__)

T = TypeVar("T")
PeriodLike = Union[str, Period]


@dataclass(frozen=True)
class SummaryReport:
    """Everything the summary view shows for one period."""

    period: Period
    totals: EntryTotals
    series: list[float]
    labels: list[str]
    chart_max: float
    trend: ProductivityTrend
    projects: list[SummaryRow]
    clients: list[SummaryRow]
    weekly_earnings: list[float]
    weekly_labels: list[str] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.totals.entries_found > 0


@dataclass(frozen=True)
class DetailedReport:
    entries: list[TimeEntry]
    totals: EntryTotals


@dataclass(frozen=True)
class WeekReport:
    labels: list[str]
    durations: list[float]
    earnings: list[float]


class ReportService:
    """Build reports from a snapshot and the user's week preference.

    The service holds no state besides its inputs and an optional cache.
    Pass a fresh snapshot whenever the underlying data changes.
    """

    def __init__(
        self,
        snapshot: Snapshot,
        first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
        cache: Optional[ReportCache] = None,
    ):
        """Initialize report service.

        Args:
            snapshot: Entries, projects, clients and users to report on
            first_day_of_week: Weekday name weeks start on
            cache: Optional memoization shared between services

        Raises:
            ValueError: If ``first_day_of_week`` is not a weekday name
        """
        day_offset(first_day_of_week)
        self.snapshot = snapshot
        self.first_day_of_week = first_day_of_week.strip().lower()
        self.cache = cache

    def _cached(self, key: tuple[Hashable, ...], compute: Callable[[], T]) -> T:
        if self.cache is None:
            return compute()
        return self.cache.get_or_compute((self.snapshot, self.first_day_of_week) + key, compute)

    def filtered(self, period: PeriodLike, now: Optional[datetime] = None) -> list[TimeEntry]:
        """Entries of the snapshot within a period."""
        return filter_by_period(self.snapshot.entries, period, now, self.first_day_of_week)

    def summary(self, period: PeriodLike, now: Optional[datetime] = None) -> SummaryReport:
        """Totals, chart series, productivity trend and grouped rows for a period."""
        period = Period.parse(period)
        now = now or datetime.now()
        return self._cached(("summary", period, day_key(now)), lambda: self._summary(period, now))

    def _summary(self, period: Period, now: datetime) -> SummaryReport:
        entries = self.filtered(period, now)
        projects = self.snapshot.projects
        values = series(entries, projects, period, self.first_day_of_week, now=now)
        logger.debug(f"Built {period.value} summary over {len(entries)} entries")
        return SummaryReport(
            period=period,
            totals=totals(entries, projects),
            series=values,
            labels=labels(period, now, self.first_day_of_week),
            chart_max=chart_max(values),
            trend=trend(entries, self.snapshot.entries, period, now, self.first_day_of_week),
            projects=by_project(entries, projects),
            clients=by_client(entries, projects, self.snapshot.clients),
            weekly_earnings=weekly_earnings(
                self.snapshot.entries, projects, self.first_day_of_week, now
            ),
            weekly_labels=labels(Period.WEEK, now, self.first_day_of_week),
        )

    def series(
        self,
        period: PeriodLike,
        metric: Union[str, SeriesMetric] = SeriesMetric.EARNINGS,
        now: Optional[datetime] = None,
    ) -> tuple[list[str], list[float]]:
        """Labels and values of a period's chart series."""
        period = Period.parse(period)
        metric = SeriesMetric(metric)
        now = now or datetime.now()

        def compute() -> tuple[list[str], list[float]]:
            entries = self.filtered(period, now)
            return (
                labels(period, now, self.first_day_of_week),
                series(
                    entries, self.snapshot.projects, period, self.first_day_of_week, metric, now
                ),
            )

        return self._cached(("series", period, metric, day_key(now)), compute)

    def trend(self, period: PeriodLike, now: Optional[datetime] = None) -> ProductivityTrend:
        """Productivity of a period against the previous one."""
        period = Period.parse(period)
        now = now or datetime.now()
        return trend(
            self.filtered(period, now), self.snapshot.entries, period, now, self.first_day_of_week
        )

    def projects(self, period: PeriodLike, now: Optional[datetime] = None) -> list[SummaryRow]:
        return by_project(self.filtered(period, now), self.snapshot.projects)

    def clients(self, period: PeriodLike, now: Optional[datetime] = None) -> list[SummaryRow]:
        return by_client(self.filtered(period, now), self.snapshot.projects, self.snapshot.clients)

    def team(self, period: PeriodLike, now: Optional[datetime] = None) -> list[SummaryRow]:
        return by_user(self.filtered(period, now), self.snapshot.projects, self.snapshot.users)

    def compare(
        self,
        by: Union[str, CompareBy] = CompareBy.PROJECTS,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> list[SummaryRow]:
        return compare(
            self.snapshot.entries,
            self.snapshot.projects,
            self.snapshot.clients,
            by,
            start_date,
            end_date,
            now,
        )

    def detailed(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[str] = None,
        project_id: Optional[str] = None,
        billable: Union[str, BillableFilter] = BillableFilter.ALL,
        now: Optional[datetime] = None,
    ) -> DetailedReport:
        """Entries matching the detailed filters, newest first, with totals."""
        entries = filter_by_range(
            self.snapshot.entries,
            self.snapshot.projects,
            start_date,
            end_date,
            client_id,
            project_id,
            billable,
            now,
        )
        entries.sort(key=lambda e: e.start_time, reverse=True)
        return DetailedReport(entries=entries, totals=totals(entries, self.snapshot.projects))

    def week(self, now: Optional[datetime] = None) -> WeekReport:
        """Per-day durations and earnings of the current week."""
        now = now or datetime.now()
        entries = self.snapshot.entries
        return WeekReport(
            labels=labels(Period.WEEK, now, self.first_day_of_week),
            durations=weekly_summary(entries, self.first_day_of_week, now),
            earnings=weekly_earnings(
                entries, self.snapshot.projects, self.first_day_of_week, now
            ),
        )

    def today(self, now: Optional[datetime] = None) -> DailyStats:
        return daily_stats(self.snapshot.entries, self.snapshot.projects, now)

    def calendar(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> CalendarMonth:
        """Month calendar of the snapshot, the current month by default."""
        now = now or datetime.now()
        return calendar_month(
            self.snapshot.entries,
            now.year if year is None else year,
            now.month if month is None else month,
            self.first_day_of_week,
        )
