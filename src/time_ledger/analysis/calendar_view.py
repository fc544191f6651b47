"""Month calendar: entries grouped by local day and laid out in week rows."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from time_ledger.analysis.bucketing import (
    DEFAULT_FIRST_DAY_OF_WEEK,
    WEEKDAYS,
    day_key,
    day_key_of,
    day_offset,
    month_end,
    weekday_index,
)
from time_ledger.core.models import TimeEntry


@dataclass(frozen=True)
class CalendarDay:
    """One day of the calendar with the entries started on it."""

    day: date
    total_time: int = 0
    entries: tuple[TimeEntry, ...] = ()

    @property
    def key(self) -> str:
        return day_key(self.day)


@dataclass(frozen=True)
class CalendarMonth:
    """A calendar month as week rows of seven cells.

    Cells before the first and after the last day of the month are None.
    """

    year: int
    month: int
    weekdays: list[str]
    weeks: list[list[Optional[CalendarDay]]] = field(default_factory=list)

    @property
    def days(self) -> list[CalendarDay]:
        """Every day of the month, in order."""
        return [cell for week in self.weeks for cell in week if cell is not None]

    @property
    def total_time(self) -> int:
        return sum(day.total_time for day in self.days)


def entries_by_day(entries: Iterable[TimeEntry]) -> dict[str, CalendarDay]:
    """Group entries by the local day they start on.

    Returns:
        Mapping of day key to the day's total and entries, entries ordered by start
    """
    grouped: dict[str, list[TimeEntry]] = {}
    for entry in entries:
        grouped.setdefault(day_key_of(entry.start_time), []).append(entry)

    result = {}
    for key, day_entries in grouped.items():
        day_entries.sort(key=lambda e: e.start_time)
        result[key] = CalendarDay(
            day=day_entries[0].start.date(),
            total_time=sum(e.duration_ms for e in day_entries),
            entries=tuple(day_entries),
        )
    return result


def calendar_month(
    entries: Iterable[TimeEntry],
    year: int,
    month: int,
    first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK,
) -> CalendarMonth:
    """Lay out a month as weeks starting on ``first_day_of_week``.

    The first row is padded with None up to the weekday of the 1st and the
    last row is padded after the last day. No row is entirely empty.

    Args:
        entries: Entries to place, any date range
        year: Calendar year
        month: Calendar month, 1-12
        first_day_of_week: Weekday name of the first column

    Raises:
        ValueError: If the month or the weekday name is invalid
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}. Use 1-12")

    offset = day_offset(first_day_of_week)
    first = date(year, month, 1)
    days_in_month = month_end(year, month).day
    by_day = entries_by_day(entries)

    cells: list[Optional[CalendarDay]] = [None] * ((weekday_index(first) - offset + 7) % 7)
    for number in range(1, days_in_month + 1):
        day = date(year, month, number)
        cells.append(by_day.get(day_key(day), CalendarDay(day=day)))
    cells.extend([None] * (-len(cells) % 7))

    return CalendarMonth(
        year=year,
        month=month,
        weekdays=[WEEKDAYS[(offset + i) % 7][:3].title() for i in range(7)],
        weeks=[cells[i : i + 7] for i in range(0, len(cells), 7)],
    )
