"""Reporting and aggregation over time entry snapshots."""

from time_ledger.analysis.bucketing import day_key, week_buckets
from time_ledger.analysis.calendar_view import CalendarMonth, calendar_month
from time_ledger.analysis.earnings import entry_earnings, total_earnings
from time_ledger.analysis.periods import Period, filter_by_period, filter_by_range
from time_ledger.analysis.productivity import ProductivityTrend, trend
from time_ledger.analysis.series import SeriesMetric, chart_max, labels
from time_ledger.analysis.service import ReportService, SummaryReport
from time_ledger.analysis.summaries import SummaryRow, by_client, by_project, compare

__all__ = [
    "CalendarMonth",
    "Period",
    "ProductivityTrend",
    "ReportService",
    "SeriesMetric",
    "SummaryReport",
    "SummaryRow",
    "by_client",
    "by_project",
    "calendar_month",
    "chart_max",
    "compare",
    "day_key",
    "entry_earnings",
    "filter_by_period",
    "filter_by_range",
    "labels",
    "total_earnings",
    "trend",
    "week_buckets",
]
