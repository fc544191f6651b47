"""Analytics endpoints for chart series and productivity.

This module serves the figures behind the dashboard charts: per-bucket
series, the productivity trend, the current week, today's totals and the
month calendar.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query  # type: ignore[import-untyped]

from time_ledger.analysis.series import chart_max
from time_ledger.analysis.service import ReportService
from time_ledger.api.dependencies import get_service
from time_ledger.api.endpoints.reports import PERIOD_PATTERN
from time_ledger.api.models import (
    CalendarResponse,
    DailyStatsResponse,
    SeriesResponse,
    TrendResponse,
    WeekResponse,
)

router = APIRouter()


@router.get("/series", response_model=SeriesResponse)
async def get_series(
    period: str = Query("30days", pattern=PERIOD_PATTERN),
    metric: str = Query("earnings", pattern="^(earnings|duration|productivity)$"),
    service: ReportService = Depends(get_service),
) -> SeriesResponse:
    """Per-bucket values of a period.

    Buckets are 12 months for ``all`` and ``year``, 30 days for
    ``30days``, 13 seven-day windows for ``quarter`` and the 7 days of the
    current week for ``week``.

    Example:
        >>> GET /api/v1/analytics/series?period=year&metric=duration
    """
    labels, values = service.series(period, metric)
    return SeriesResponse(
        period=period,
        metric=metric,
        labels=labels,
        values=values,
        chart_max=chart_max(values),
    )


@router.get("/productivity", response_model=TrendResponse)
async def get_productivity(
    period: str = Query("30days", pattern=PERIOD_PATTERN),
    service: ReportService = Depends(get_service),
) -> TrendResponse:
    """Billable share of tracked time and its change against the previous period."""
    return TrendResponse.from_trend(service.trend(period))


@router.get("/week", response_model=WeekResponse)
async def get_week(service: ReportService = Depends(get_service)) -> WeekResponse:
    """Per-day durations and earnings of the current week."""
    report = service.week()
    return WeekResponse(labels=report.labels, durations=report.durations, earnings=report.earnings)


@router.get("/today", response_model=DailyStatsResponse)
async def get_today(service: ReportService = Depends(get_service)) -> DailyStatsResponse:
    """Today's tracked time, billable split and earnings."""
    return DailyStatsResponse.from_stats(service.today())


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    month: Optional[str] = Query(None, description="Month as YYYY-MM, default current"),
    service: ReportService = Depends(get_service),
) -> CalendarResponse:
    """Month grid of tracked time per day, weeks starting on the first day of week.

    Example:
        >>> GET /api/v1/analytics/calendar?month=2024-02&week_start=sunday
    """
    if month is None:
        return CalendarResponse.from_month(service.calendar())

    try:
        parsed = datetime.strptime(month, "%Y-%m")
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid month: {month}. Use YYYY-MM")
    return CalendarResponse.from_month(service.calendar(parsed.year, parsed.month))
