"""Productivity (billable share of tracked time) and its trend."""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

from time_ledger.analysis.bucketing import (
    DEFAULT_FIRST_DAY_OF_WEEK,
    Window,
    add_months,
    month_start,
    quarter_start,
    start_of_day,
    week_window,
)
from time_ledger.analysis.earnings import (
    Projects,
    billable_duration,
    finite,
    total_duration,
    total_earnings,
)
from time_ledger.analysis.periods import Period, filter_by_window, today_entries
from time_ledger.core.models import TimeEntry

ONE_MS = timedelta(milliseconds=1)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(finite(value) + 0.5))


@dataclass(frozen=True)
class ProductivityTrend:
    """Productivity of a period compared with the one before it.

    Attributes:
        percentage: Billable share of the current period (0-100)
        trend_delta: Signed change against the previous period
        has_data: False when the current period had no entries at all,
            which a percentage of 0 alone cannot tell apart
    """

    percentage: int
    trend_delta: int
    has_data: bool


@dataclass(frozen=True)
class DailyStats:
    """Today's tracked time split by billable status."""

    total_time: int
    billable_time: int
    non_billable_time: int
    earnings: float
    entries: int


def productivity(entries: Iterable[TimeEntry]) -> int:
    """Billable duration as a rounded percentage of total duration.

    Returns 0 when nothing was tracked.
    """
    entries = list(entries)
    total = total_duration(entries)
    if total <= 0:
        return 0
    return round_half_up(billable_duration(entries) / total * 100)


def comparison_window(
    period: Union[str, Period],
    now: Optional[datetime] = None,
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
) -> Window:
    """Window immediately preceding the current period, of equal length.

    ``30days`` and ``all`` compare against days 31-60 ago, ``quarter``
    against the previous calendar quarter, ``year`` against the previous
    calendar year and ``week`` against the previous week.
    """
    period = Period.parse(period)
    now = now or datetime.now()

    if period is Period.QUARTER:
        current = quarter_start(now)
        year, month = add_months(current.year, current.month, -3)
        return Window(month_start(year, month), current - ONE_MS)
    if period is Period.YEAR:
        return Window(datetime(now.year - 1, 1, 1), datetime(now.year, 1, 1) - ONE_MS)
    if period is Period.WEEK:
        current = week_window(now, first_day_of_week).start
        return Window(current - timedelta(days=7), current - ONE_MS)
    current = start_of_day(now - timedelta(days=30))
    return Window(start_of_day(now - timedelta(days=60)), current - ONE_MS)


def trend(
    filtered_entries: Iterable[TimeEntry],
    all_entries: Iterable[TimeEntry],
    period: Union[str, Period],
    now: Optional[datetime] = None,
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
) -> ProductivityTrend:
    """Productivity of the current period and its change.

    When the previous period has no productivity the delta equals the
    current percentage.

    Args:
        filtered_entries: Entries of the current period
        all_entries: Every entry, searched for the comparison window
        period: Period the entries were filtered by
        now: Reference time, defaults to the current local time
        first_day_of_week: Week start, used by ``Period.WEEK``

    Returns:
        Percentage, trend delta and whether any current data existed
    """
    period = Period.parse(period)
    filtered_entries = list(filtered_entries)
    if not filtered_entries:
        return ProductivityTrend(percentage=0, trend_delta=0, has_data=False)

    percentage = productivity(filtered_entries)
    window = comparison_window(period, now, first_day_of_week)
    previous = productivity(filter_by_window(all_entries, window))

    delta = percentage - previous if previous > 0 else percentage
    return ProductivityTrend(
        percentage=percentage,
        trend_delta=round_half_up(delta),
        has_data=True,
    )


def daily_stats(
    entries: Iterable[TimeEntry],
    projects: Projects,
    now: Optional[datetime] = None,
) -> DailyStats:
    """Dashboard figures for entries started today."""
    today = today_entries(entries, now)
    total = total_duration(today)
    billable = billable_duration(today)
    return DailyStats(
        total_time=total,
        billable_time=billable,
        non_billable_time=total - billable,
        earnings=total_earnings(today, projects),
        entries=len(today),
    )
