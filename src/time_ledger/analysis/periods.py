"""Relative reporting periods and entry filters."""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Union

from time_ledger.analysis.bucketing import (
    DEFAULT_FIRST_DAY_OF_WEEK,
    Window,
    end_of_day,
    quarter_start,
    start_of_day,
    to_ms,
    week_window,
)
from time_ledger.analysis.earnings import Projects, project_index
from time_ledger.core.models import TimeEntry


class Period(str, Enum):
    """Named relative date range used to filter entries."""

    ALL = "all"
    LAST_30_DAYS = "30days"
    QUARTER = "quarter"
    YEAR = "year"
    WEEK = "week"

    @classmethod
    def parse(cls, value: Union[str, "Period"]) -> "Period":
        """Resolve a period name.

        Raises:
            ValueError: If the name is not a known period
        """
        if isinstance(value, Period):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown period: {value!r}. Use one of: {valid}") from None


class BillableFilter(str, Enum):
    """Billable status filter of the detailed report."""

    ALL = "all"
    BILLABLE = "billable"
    NON_BILLABLE = "non-billable"


def period_window(
    period: Union[str, Period],
    now: Optional[datetime] = None,
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
) -> Optional[Window]:
    """Window covered by a period, or None for ``all``.

    Every window ends at the last millisecond of today.
    """
    period = Period.parse(period)
    now = now or datetime.now()
    end = end_of_day(now)

    if period is Period.ALL:
        return None
    if period is Period.LAST_30_DAYS:
        return Window(start_of_day(now - timedelta(days=30)), end)
    if period is Period.QUARTER:
        return Window(quarter_start(now), end)
    if period is Period.YEAR:
        return Window(datetime(now.year, 1, 1), end)
    return Window(week_window(now, first_day_of_week).start, end)


def filter_by_window(entries: Iterable[TimeEntry], window: Window) -> list[TimeEntry]:
    """Entries whose start time falls inside the window (inclusive)."""
    start_ms, end_ms = window.start_ms, window.end_ms
    return [e for e in entries if start_ms <= e.start_time <= end_ms]


def filter_by_period(
    entries: Iterable[TimeEntry],
    period: Union[str, Period],
    now: Optional[datetime] = None,
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
) -> list[TimeEntry]:
    """Restrict entries to a named period.

    Only the start time is considered, so an entry crossing the window
    boundary is kept or dropped as a whole.

    Args:
        entries: Entries to filter
        period: One of the ``Period`` names
        now: Reference time, defaults to the current local time
        first_day_of_week: Week start used by ``Period.WEEK``

    Returns:
        Filtered entries in input order
    """
    window = period_window(period, now, first_day_of_week)
    if window is None:
        return list(entries)
    return filter_by_window(entries, window)


def filter_by_range(
    entries: Iterable[TimeEntry],
    projects: Projects,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    client_id: Optional[str] = None,
    project_id: Optional[str] = None,
    billable: Union[str, BillableFilter] = BillableFilter.ALL,
    now: Optional[datetime] = None,
) -> list[TimeEntry]:
    """Detailed-report filter over a custom date range.

    Args:
        entries: Entries to filter
        projects: Project snapshot, used to resolve client ownership
        start_date: First day included (None for no lower bound)
        end_date: Last day included, through 23:59:59.999 (None for now)
        client_id: Keep only entries of this client's projects
        project_id: Keep only entries of this project
        billable: Billable status filter
        now: Upper bound when ``end_date`` is None

    Returns:
        Matching entries in input order
    """
    billable = BillableFilter(billable)
    index = project_index(projects)
    start_ms = to_ms(start_of_day(start_date)) if start_date else 0
    end_ms = to_ms(end_of_day(end_date)) if end_date else to_ms(now or datetime.now())

    result = []
    for entry in entries:
        if entry.start_time < start_ms or entry.start_time > end_ms:
            continue
        if client_id is not None:
            project = index.get(entry.project_id or "")
            if project is None or project.client_id != client_id:
                continue
        if project_id is not None and entry.project_id != project_id:
            continue
        if billable is BillableFilter.BILLABLE and not entry.billable:
            continue
        if billable is BillableFilter.NON_BILLABLE and entry.billable:
            continue
        result.append(entry)
    return result


def today_entries(entries: Iterable[TimeEntry], now: Optional[datetime] = None) -> list[TimeEntry]:
    """Entries that started today."""
    now = now or datetime.now()
    return filter_by_window(entries, Window(start_of_day(now), end_of_day(now)))
