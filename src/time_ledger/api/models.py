"""Pydantic models for API responses.

This module defines the data models returned by the read-only API.
Durations are integer milliseconds and earnings are plain floats in the
configured currency.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field  # type: ignore[import-untyped]

from time_ledger.analysis.calendar_view import CalendarDay, CalendarMonth
from time_ledger.analysis.productivity import DailyStats, ProductivityTrend
from time_ledger.analysis.summaries import EntryTotals, SummaryRow
from time_ledger.core.models import TimeEntry

# ============================================================================
# Response Models
# ============================================================================


class SummaryRowResponse(BaseModel):
    """One row of a grouped summary (project, client or user)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    total_time: int = Field(..., description="Tracked time in milliseconds")
    total_earnings: float
    billable_time: int = 0

    @classmethod
    def from_row(cls, row: SummaryRow) -> "SummaryRowResponse":
        return cls.model_validate(row)


class TotalsResponse(BaseModel):
    """Totals over a set of entries."""

    model_config = ConfigDict(from_attributes=True)

    total_time: int
    total_earnings: float
    entries_found: int

    @classmethod
    def from_totals(cls, totals: EntryTotals) -> "TotalsResponse":
        return cls.model_validate(totals)


class TrendResponse(BaseModel):
    """Productivity percentage and its change against the previous period."""

    model_config = ConfigDict(from_attributes=True)

    percentage: int = Field(..., ge=0, le=100)
    trend_delta: int
    has_data: bool

    @classmethod
    def from_trend(cls, value: ProductivityTrend) -> "TrendResponse":
        return cls.model_validate(value)


class SeriesResponse(BaseModel):
    """Chart series with one label per value."""

    period: str
    metric: str
    labels: list[str]
    values: list[float]
    chart_max: float


class SummaryResponse(BaseModel):
    """Everything the summary view shows for one period."""

    period: str
    has_data: bool
    totals: TotalsResponse
    labels: list[str]
    series: list[float]
    chart_max: float
    trend: TrendResponse
    projects: list[SummaryRowResponse]
    clients: list[SummaryRowResponse]
    weekly_labels: list[str]
    weekly_earnings: list[float]


class EntryResponse(BaseModel):
    """Response model for a time entry."""

    id: str
    description: str
    start_time: datetime
    end_time: datetime
    duration_ms: int
    project_id: Optional[str] = None
    project_name: Optional[str] = None
    task_id: Optional[str] = None
    billable: bool = False
    user_id: str = ""
    is_manual: bool = False

    @classmethod
    def from_entry(cls, entry: TimeEntry, project_name: Optional[str] = None) -> "EntryResponse":
        """Create response from a TimeEntry.

        Args:
            entry: TimeEntry instance from core.models
            project_name: Display name of the entry's project, if known

        Returns:
            EntryResponse instance
        """
        return cls(
            id=entry.id,
            description=entry.description,
            start_time=entry.start,
            end_time=entry.end,
            duration_ms=entry.duration_ms,
            project_id=entry.project_id,
            project_name=project_name,
            task_id=entry.task_id,
            billable=entry.billable,
            user_id=entry.user_id,
            is_manual=entry.is_manual,
        )


class DetailedResponse(BaseModel):
    """Filtered entries, newest first, with their totals."""

    entries: list[EntryResponse]
    totals: TotalsResponse


class WeekResponse(BaseModel):
    """Per-day figures of the current week."""

    labels: list[str]
    durations: list[float] = Field(..., description="Tracked milliseconds per day")
    earnings: list[float]


class DailyStatsResponse(BaseModel):
    """Today's dashboard figures."""

    model_config = ConfigDict(from_attributes=True)

    total_time: int
    billable_time: int
    non_billable_time: int
    earnings: float
    entries: int

    @classmethod
    def from_stats(cls, stats: DailyStats) -> "DailyStatsResponse":
        return cls.model_validate(stats)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status (healthy/unhealthy)")
    timestamp: datetime = Field(..., description="Current server time")
    version: str = Field(..., description="API version")
    entries: int = Field(0, description="Entries in the data directory")


class CalendarDayResponse(BaseModel):
    """One day cell of the month calendar."""

    day: date
    total_time: int = Field(..., description="Tracked milliseconds started on this day")
    entry_ids: list[str]

    @classmethod
    def from_day(cls, day: CalendarDay) -> "CalendarDayResponse":
        return cls(
            day=day.day,
            total_time=day.total_time,
            entry_ids=[entry.id for entry in day.entries],
        )


class CalendarResponse(BaseModel):
    """Month calendar as week rows; padding cells are null."""

    year: int
    month: int
    weekdays: list[str]
    total_time: int
    weeks: list[list[Optional[CalendarDayResponse]]]

    @classmethod
    def from_month(cls, calendar: CalendarMonth) -> "CalendarResponse":
        return cls(
            year=calendar.year,
            month=calendar.month,
            weekdays=calendar.weekdays,
            total_time=calendar.total_time,
            weeks=[
                [None if day is None else CalendarDayResponse.from_day(day) for day in week]
                for week in calendar.weeks
            ],
        )
