"""Terminal rendering of reports."""

from typing import Optional

from rich.console import Console  # type: ignore[import-not-found]
from rich.table import Table  # type: ignore[import-not-found]
from rich.text import Text  # type: ignore[import-not-found]

from time_ledger.analysis.calendar_view import CalendarMonth
from time_ledger.analysis.productivity import DailyStats, ProductivityTrend
from time_ledger.analysis.series import chart_max
from time_ledger.analysis.service import DetailedReport, SummaryReport, WeekReport
from time_ledger.analysis.summaries import SummaryRow
from time_ledger.core.models import MS_PER_HOUR

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}


def format_duration(milliseconds: float, time_format: str = "human") -> str:
    """Format a duration in milliseconds.

    Args:
        milliseconds: Duration to format
        time_format: ``human`` (``2h 5m``) or ``decimal`` (``2.08h``)

    Returns:
        Formatted duration string
    """
    milliseconds = max(0, milliseconds)
    if time_format == "decimal":
        return f"{milliseconds / MS_PER_HOUR:.2f}h"

    seconds = int(milliseconds // 1000)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m"
    elif minutes > 0:
        return f"{minutes}m {secs}s"
    else:
        return f"{secs}s"


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format an amount with its currency symbol, two decimals."""
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{amount:,.2f} {currency.upper()}"
    return f"{symbol}{amount:,.2f}"


class ReportGenerator:
    """Render reports to a rich console."""

    def __init__(
        self,
        console: Optional[Console] = None,
        currency: str = "USD",
        time_format: str = "human",
    ):
        """Initialize report generator.

        Args:
            console: Rich console for output. Creates default if None.
            currency: Currency code used for earnings
            time_format: Duration style, ``human`` or ``decimal``
        """
        self.console = console or Console()
        self.currency = currency
        self.time_format = time_format

    def _duration(self, milliseconds: float) -> str:
        return format_duration(milliseconds, self.time_format)

    def _money(self, amount: float) -> str:
        return format_currency(amount, self.currency)

    def summary_report(self, report: SummaryReport, period_label: str = "Summary") -> None:
        """Display totals, the earnings chart, productivity and grouped tables."""
        if not report.has_data:
            self.console.print("[yellow]No entries found for this period[/yellow]")
            return

        self.console.print(f"\n[bold cyan]Time Ledger - {period_label}[/bold cyan]\n")

        overview_table = Table(show_header=False, box=None, padding=(0, 2))
        overview_table.add_column(style="dim")
        overview_table.add_column(style="bold")
        overview_table.add_row("Total Time:", self._duration(report.totals.total_time))
        overview_table.add_row("Total Earnings:", self._money(report.totals.total_earnings))
        overview_table.add_row("Entries:", str(report.totals.entries_found))
        self.console.print(overview_table)
        self.console.print()

        self.trend_panel(report.trend)
        self.series_chart(report.labels, report.series, "Earnings", money=True)
        self.grouped_table(report.projects, "Earnings by Project", "Project")
        self.grouped_table(report.clients, "Earnings by Client", "Client")

    def trend_panel(self, trend: ProductivityTrend) -> None:
        """Display productivity percentage and its change."""
        if not trend.has_data:
            self.console.print("[dim]Productivity: no data for this period[/dim]\n")
            return

        arrow = "▲" if trend.trend_delta > 0 else "▼" if trend.trend_delta < 0 else "■"
        style = "green" if trend.trend_delta > 0 else "red" if trend.trend_delta < 0 else "dim"
        self.console.print(
            f"[bold]Productivity:[/bold] {trend.percentage}% "
            f"[{style}]{arrow} {trend.trend_delta:+d}%[/{style}]\n"
        )

    def series_chart(
        self,
        labels: list[str],
        values: list[float],
        title: str,
        money: bool = False,
    ) -> None:
        """Display a series as a horizontal bar chart."""
        peak = chart_max(values)
        chart = Table(title=title)
        chart.add_column("Bucket", style="cyan")
        chart.add_column("Value", style="magenta", justify="right")
        chart.add_column("Bar", style="blue")

        for label, value in zip(labels, values):
            shown = self._money(value) if money else self._duration(value)
            chart.add_row(label, shown, self._create_bar(value / peak * 100))

        self.console.print(chart)
        self.console.print()

    def grouped_table(self, rows: list[SummaryRow], title: str, key_label: str) -> None:
        """Display grouped totals."""
        if not rows:
            return

        table = Table(title=title)
        table.add_column(key_label, style="cyan")
        table.add_column("Time", style="magenta", justify="right")
        table.add_column("Billable", style="blue", justify="right")
        table.add_column("Earnings", style="green", justify="right")

        for row in rows:
            table.add_row(
                row.name,
                self._duration(row.total_time),
                self._duration(row.billable_time),
                self._money(row.total_earnings),
            )

        self.console.print(table)
        self.console.print()

    def week_report(self, report: WeekReport) -> None:
        """Display the current week, day by day."""
        table = Table(title="This Week")
        table.add_column("Day", style="cyan")
        table.add_column("Time", style="magenta", justify="right")
        table.add_column("Earnings", style="green", justify="right")
        table.add_column("Bar", style="blue")

        peak = chart_max(report.durations)
        for label, duration, earned in zip(report.labels, report.durations, report.earnings):
            table.add_row(
                label,
                self._duration(duration),
                self._money(earned),
                self._create_bar(duration / peak * 100),
            )

        self.console.print(table)

    def today_report(self, stats: DailyStats) -> None:
        """Display today's dashboard figures."""
        if stats.entries == 0:
            self.console.print("[yellow]Nothing tracked today[/yellow]")
            return

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style="dim")
        table.add_column(style="bold")
        table.add_row("Total Time:", self._duration(stats.total_time))
        table.add_row("Billable:", self._duration(stats.billable_time))
        table.add_row("Non-billable:", self._duration(stats.non_billable_time))
        table.add_row("Earned:", self._money(stats.earnings))
        table.add_row("Entries:", str(stats.entries))

        self.console.print("\n[bold cyan]Today[/bold cyan]\n")
        self.console.print(table)

    def calendar_report(self, calendar: CalendarMonth) -> None:
        """Display a month grid with the tracked time of each day."""
        title = f"{calendar.year}-{calendar.month:02d}"
        table = Table(title=f"Calendar {title}", show_lines=True)
        for weekday in calendar.weekdays:
            table.add_column(weekday, justify="center", min_width=8)

        for week in calendar.weeks:
            cells = []
            for day in week:
                if day is None:
                    cells.append("")
                elif day.total_time:
                    cells.append(
                        f"[bold]{day.day.day}[/bold]\n[magenta]"
                        f"{self._duration(day.total_time)}[/magenta]"
                    )
                else:
                    cells.append(f"[dim]{day.day.day}[/dim]")
            table.add_row(*cells)

        self.console.print(table)
        self.console.print(f"\nMonth total: {self._duration(calendar.total_time)}")

    def detailed_report(self, report: DetailedReport, project_names: dict[str, str]) -> None:
        """Display filtered entries with their totals."""
        if not report.entries:
            self.console.print("[yellow]No entries match these filters[/yellow]")
            return

        table = Table(title=f"Detailed Report ({report.totals.entries_found} entries)")
        table.add_column("Date", style="cyan")
        table.add_column("Description", style="bold")
        table.add_column("Project", style="blue")
        table.add_column("Duration", style="magenta", justify="right")
        table.add_column("Billable", justify="center")

        for entry in report.entries:
            description = entry.description
            table.add_row(
                entry.start.strftime("%Y-%m-%d"),
                description[:50] + "..." if len(description) > 50 else description,
                project_names.get(entry.project_id or "", "-"),
                self._duration(entry.duration_ms),
                "✓" if entry.billable else "",
            )

        self.console.print(table)
        self.console.print(
            f"\nTotal: {self._duration(report.totals.total_time)}  "
            f"Earnings: {self._money(report.totals.total_earnings)}"
        )

    def _create_bar(self, percentage: float, width: int = 25) -> Text:
        """Create a visual bar for percentage display.

        Args:
            percentage: Percentage value (0-100)
            width: Width of the bar in characters

        Returns:
            Rich Text object with colored bar
        """
        filled = int((percentage / 100) * width)
        empty = width - filled

        bar = Text()
        bar.append("█" * filled, style="blue")
        bar.append("░" * empty, style="dim")

        return bar
