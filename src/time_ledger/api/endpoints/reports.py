"""Report endpoints: period summaries, grouped rows and detailed listings.

All endpoints are read-only. The period parameter accepts
``all``, ``30days``, ``quarter``, ``year`` and ``week``.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status  # type: ignore[import-untyped]

from time_ledger.analysis.service import ReportService
from time_ledger.api.dependencies import get_service
from time_ledger.api.models import (
    DetailedResponse,
    EntryResponse,
    SummaryResponse,
    SummaryRowResponse,
    TotalsResponse,
    TrendResponse,
)

router = APIRouter()

PERIOD_PATTERN = "^(all|30days|quarter|year|week)$"


def _parse_date(value: Optional[str], name: str) -> Optional[date]:
    """Parse an optional YYYY-MM-DD query value.

    Raises:
        HTTPException: 400 if the value is not a valid date
    """
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name}: {value!r}. Use YYYY-MM-DD",
        ) from None


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    period: str = Query("30days", pattern=PERIOD_PATTERN),
    service: ReportService = Depends(get_service),
) -> SummaryResponse:
    """Totals, chart series, productivity trend and grouped rows for a period.

    Example:
        >>> GET /api/v1/reports/summary?period=quarter
    """
    report = service.summary(period)
    return SummaryResponse(
        period=report.period.value,
        has_data=report.has_data,
        totals=TotalsResponse.from_totals(report.totals),
        labels=report.labels,
        series=report.series,
        chart_max=report.chart_max,
        trend=TrendResponse.from_trend(report.trend),
        projects=[SummaryRowResponse.from_row(r) for r in report.projects],
        clients=[SummaryRowResponse.from_row(r) for r in report.clients],
        weekly_labels=report.weekly_labels,
        weekly_earnings=report.weekly_earnings,
    )


@router.get("/projects", response_model=list[SummaryRowResponse])
async def get_projects(
    period: str = Query("30days", pattern=PERIOD_PATTERN),
    service: ReportService = Depends(get_service),
) -> list[SummaryRowResponse]:
    """Time and earnings per project, highest earnings first."""
    return [SummaryRowResponse.from_row(r) for r in service.projects(period)]


@router.get("/clients", response_model=list[SummaryRowResponse])
async def get_clients(
    period: str = Query("30days", pattern=PERIOD_PATTERN),
    service: ReportService = Depends(get_service),
) -> list[SummaryRowResponse]:
    """Time and earnings per client, including clients without entries."""
    return [SummaryRowResponse.from_row(r) for r in service.clients(period)]


@router.get("/team", response_model=list[SummaryRowResponse])
async def get_team(
    period: str = Query("30days", pattern=PERIOD_PATTERN),
    service: ReportService = Depends(get_service),
) -> list[SummaryRowResponse]:
    """Time and earnings per user, sorted by name."""
    return [SummaryRowResponse.from_row(r) for r in service.team(period)]


@router.get("/compare", response_model=list[SummaryRowResponse])
async def get_comparison(
    by: str = Query("projects", pattern="^(projects|clients)$"),
    start_date: Optional[str] = Query(None, description="First day (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="Last day (YYYY-MM-DD)"),
    service: ReportService = Depends(get_service),
) -> list[SummaryRowResponse]:
    """Compare projects or clients over a date range.

    Rows without tracked time are left out.

    Example:
        >>> GET /api/v1/reports/compare?by=clients&start_date=2025-01-01
    """
    rows = service.compare(
        by,
        _parse_date(start_date, "start_date"),
        _parse_date(end_date, "end_date"),
    )
    return [SummaryRowResponse.from_row(r) for r in rows]


@router.get("/detailed", response_model=DetailedResponse)
async def get_detailed(
    start_date: Optional[str] = Query(None, description="First day (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="Last day (YYYY-MM-DD)"),
    client_id: Optional[str] = Query(None),
    project_id: Optional[str] = Query(None),
    billable: str = Query("all", pattern="^(all|billable|non-billable)$"),
    service: ReportService = Depends(get_service),
) -> DetailedResponse:
    """Entries matching the filters, newest first, with totals."""
    report = service.detailed(
        start_date=_parse_date(start_date, "start_date"),
        end_date=_parse_date(end_date, "end_date"),
        client_id=client_id,
        project_id=project_id,
        billable=billable,
    )
    names = {p.id: p.name for p in service.snapshot.projects}
    return DetailedResponse(
        entries=[
            EntryResponse.from_entry(e, names.get(e.project_id or "")) for e in report.entries
        ],
        totals=TotalsResponse.from_totals(report.totals),
    )
