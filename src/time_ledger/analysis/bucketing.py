"""Calendar bucketing of timestamps into days, weeks and months.

All calendar arithmetic happens in the local timezone of the running
process, on naive ``datetime`` values. Timestamps are milliseconds since
the epoch, as stored on ``TimeEntry``.
"""

from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Union

# Sunday-first, matching the weekday index used for week rotation
WEEKDAYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

DEFAULT_FIRST_DAY_OF_WEEK = "monday"

DateLike = Union[date, datetime]


class Window(NamedTuple):
    """Inclusive time window, both ends as local datetimes."""

    start: datetime
    end: datetime

    @property
    def start_ms(self) -> int:
        return to_ms(self.start)

    @property
    def end_ms(self) -> int:
        return to_ms(self.end)

    def contains(self, timestamp_ms: int) -> bool:
        """Check whether a millisecond timestamp falls inside the window."""
        return self.start_ms <= timestamp_ms <= self.end_ms


def to_ms(value: datetime) -> int:
    """Convert a local datetime to milliseconds since epoch."""
    return int(round(value.timestamp() * 1000))


def from_ms(timestamp_ms: int) -> datetime:
    """Convert milliseconds since epoch to a local datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000)


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def start_of_day(value: DateLike) -> datetime:
    """Local midnight of the given day."""
    return datetime.combine(_as_date(value), time.min)


def end_of_day(value: DateLike) -> datetime:
    """Last millisecond of the given day."""
    return datetime.combine(_as_date(value), time(23, 59, 59, 999000))


def day_key(value: DateLike) -> str:
    """Canonical YYYY-MM-DD key of a local calendar day."""
    return _as_date(value).strftime("%Y-%m-%d")


def day_key_of(timestamp_ms: int) -> str:
    """Day key of a millisecond timestamp."""
    return day_key(from_ms(timestamp_ms))


def day_offset(first_day_of_week: str) -> int:
    """Sunday-first index of a weekday name.

    Raises:
        ValueError: If the name is not one of the seven weekdays
    """
    name = first_day_of_week.strip().lower()
    if name not in WEEKDAYS:
        raise ValueError(
            f"Unknown first day of week: {first_day_of_week!r}. "
            f"Use one of: {', '.join(WEEKDAYS)}"
        )
    return WEEKDAYS.index(name)


def weekday_index(value: DateLike) -> int:
    """Sunday-first weekday index (Sunday=0 ... Saturday=6)."""
    return (_as_date(value).weekday() + 1) % 7


def week_buckets(
    reference: DateLike, first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK
) -> list[date]:
    """The seven days of the week containing ``reference``.

    Args:
        reference: Any day inside the wanted week
        first_day_of_week: Weekday name the week starts on

    Returns:
        Seven consecutive dates, the first one being ``first_day_of_week``
    """
    ref = _as_date(reference)
    days_back = (weekday_index(ref) - day_offset(first_day_of_week) + 7) % 7
    first = ref - timedelta(days=days_back)
    return [first + timedelta(days=i) for i in range(7)]


def week_window(
    reference: DateLike, first_day_of_week: str = DEFAULT_FIRST_DAY_OF_WEEK
) -> Window:
    """Whole-day window covering the week containing ``reference``."""
    days = week_buckets(reference, first_day_of_week)
    return Window(start_of_day(days[0]), end_of_day(days[-1]))


def add_months(year: int, month: int, delta: int) -> tuple[int, int]:
    """Shift a (year, month) pair by ``delta`` months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_start(year: int, month: int) -> datetime:
    """Midnight of the first day of a calendar month."""
    return datetime(year, month, 1)


def month_end(year: int, month: int) -> datetime:
    """Last millisecond of a calendar month."""
    next_year, next_month = add_months(year, month, 1)
    return end_of_day(date(next_year, next_month, 1) - timedelta(days=1))


def month_window(year: int, month: int) -> Window:
    return Window(month_start(year, month), month_end(year, month))


def quarter_start(value: DateLike) -> datetime:
    """Midnight of the first day of the calendar quarter containing ``value``."""
    day = _as_date(value)
    return datetime(day.year, ((day.month - 1) // 3) * 3 + 1, 1)


def month_buckets(reference: DateLike, count: int = 12) -> list[tuple[int, int]]:
    """The ``count`` calendar months ending with the month of ``reference``.

    Returns:
        (year, month) pairs, oldest first
    """
    day = _as_date(reference)
    return [add_months(day.year, day.month, -(count - 1 - i)) for i in range(count)]


def day_buckets(reference: DateLike, count: int = 30) -> list[date]:
    """The ``count`` calendar days ending with ``reference``, oldest first."""
    day = _as_date(reference)
    return [day - timedelta(days=count - 1 - i) for i in range(count)]


def stride_windows(reference: DateLike, count: int = 13, stride_days: int = 7) -> list[Window]:
    """Fixed-length windows walking backwards from ``reference``.

    Window ``i`` ends on ``reference - stride_days * (count - 1 - i)`` days and
    spans ``stride_days`` whole days. Windows are not snapped to calendar weeks.
    """
    day = _as_date(reference)
    windows = []
    for i in range(count):
        last = day - timedelta(days=stride_days * (count - 1 - i))
        first = last - timedelta(days=stride_days - 1)
        windows.append(Window(start_of_day(first), end_of_day(last)))
    return windows
