"""Chart series: per-bucket earnings, durations and productivity.

A series is an ordered list of numbers, one per bucket, oldest bucket
first. The buckets depend on the period:

- ``all`` / ``year``: 12 calendar months ending with the current month
- ``30days``: 30 calendar days ending today
- ``quarter``: 13 fixed 7-day windows walking back from today, not
  aligned to calendar weeks
- ``week``: the 7 days of the current week, from the first day of week

Entries are assigned to a bucket by their start time only.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional, Union

from time_ledger.analysis.bucketing import (
    DEFAULT_FIRST_DAY_OF_WEEK,
    Window,
    day_buckets,
    end_of_day,
    month_buckets,
    month_window,
    start_of_day,
    stride_windows,
    week_buckets,
)
from time_ledger.analysis.earnings import Projects, finite, project_index, total_earnings
from time_ledger.analysis.periods import Period, filter_by_window
from time_ledger.analysis.productivity import productivity
from time_ledger.core.models import TimeEntry

MONTH_BUCKETS = 12
DAY_BUCKETS = 30
STRIDE_BUCKETS = 13
STRIDE_DAYS = 7


class SeriesMetric(str, Enum):
    """Value computed for each bucket."""

    EARNINGS = "earnings"
    DURATION = "duration"
    PRODUCTIVITY = "productivity"


class Bucket(NamedTuple):
    label: str
    window: Window


def buckets(
    period: Union[str, Period],
    now: Optional[datetime] = None,
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
) -> list[Bucket]:
    """Labelled bucket windows for a period, oldest first."""
    period = Period.parse(period)
    now = now or datetime.now()

    if period in (Period.ALL, Period.YEAR):
        return [
            Bucket(datetime(year, month, 1).strftime("%b"), month_window(year, month))
            for year, month in month_buckets(now, MONTH_BUCKETS)
        ]
    if period is Period.LAST_30_DAYS:
        return [
            Bucket(day.strftime("%b %d"), Window(start_of_day(day), end_of_day(day)))
            for day in day_buckets(now, DAY_BUCKETS)
        ]
    if period is Period.QUARTER:
        return [
            Bucket(window.start.strftime("%b %d"), window)
            for window in stride_windows(now, STRIDE_BUCKETS, STRIDE_DAYS)
        ]
    return [
        Bucket(day.strftime("%a"), Window(start_of_day(day), end_of_day(day)))
        for day in week_buckets(now, first_day_of_week)
    ]


def labels(
    period: Union[str, Period],
    now: Optional[datetime] = None,
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
) -> list[str]:
    """Bucket labels, the same length as the matching ``series``."""
    return [bucket.label for bucket in buckets(period, now, first_day_of_week)]


def _bucket_value(entries: list[TimeEntry], projects: Projects, metric: SeriesMetric) -> float:
    if metric is SeriesMetric.DURATION:
        return sum(e.duration_ms for e in entries)
    if metric is SeriesMetric.PRODUCTIVITY:
        return productivity(entries)
    return total_earnings(entries, projects)


def series(
    entries: Iterable[TimeEntry],
    projects: Projects,
    period: Union[str, Period],
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
    metric: Union[str, SeriesMetric] = SeriesMetric.EARNINGS,
    now: Optional[datetime] = None,
) -> list[float]:
    """Per-bucket values for a period.

    Entries outside every bucket are ignored. In particular the quarter
    buckets cover the last 91 days rather than the calendar quarter, so a
    quarter series can miss entries the quarter filter keeps.

    Args:
        entries: Entries to aggregate, usually already period-filtered
        projects: Project snapshot used for earnings
        period: Period selecting the bucket layout
        first_day_of_week: Week start, used by ``Period.WEEK``
        metric: ``earnings`` (currency), ``duration`` (ms) or
            ``productivity`` (billable percentage)
        now: Reference time, defaults to the current local time

    Returns:
        One value per bucket, oldest first
    """
    metric = SeriesMetric(metric)
    entries = list(entries)
    index = project_index(projects)
    return [
        finite(_bucket_value(filter_by_window(entries, bucket.window), index, metric))
        for bucket in buckets(period, now, first_day_of_week)
    ]


def weekly_summary(
    entries: Iterable[TimeEntry],
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
    now: Optional[datetime] = None,
) -> list[float]:
    """Tracked milliseconds for each day of the current week."""
    return series(entries, {}, Period.WEEK, first_day_of_week, SeriesMetric.DURATION, now)


def weekly_earnings(
    entries: Iterable[TimeEntry],
    projects: Projects,
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
    now: Optional[datetime] = None,
) -> list[float]:
    """Earnings for each day of the current week."""
    return series(entries, projects, Period.WEEK, first_day_of_week, SeriesMetric.EARNINGS, now)


def chart_max(values: Sequence[float]) -> float:
    """Scaling maximum of a series; never below 1 so charts never divide by zero."""
    return max([*values, 1])
