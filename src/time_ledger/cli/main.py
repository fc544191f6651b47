"""Main CLI application."""

import json
import sys
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

import click
from rich.console import Console

from time_ledger import __version__
from time_ledger.analysis.bucketing import WEEKDAYS
from time_ledger.analysis.cache import ReportCache
from time_ledger.analysis.periods import BillableFilter, Period
from time_ledger.analysis.reports import ReportGenerator
from time_ledger.analysis.series import SeriesMetric
from time_ledger.analysis.service import ReportService
from time_ledger.analysis.summaries import CompareBy
from time_ledger.cli.config_commands import config
from time_ledger.core.config import ConfigManager, setup_logging
from time_ledger.core.storage import StorageManager

console = Console()
error_console = Console(stderr=True)

PERIOD_CHOICES = [p.value for p in Period]
PERIOD_LABELS = {
    Period.ALL: "All Time",
    Period.LAST_30_DAYS: "Last 30 Days",
    Period.QUARTER: "This Quarter",
    Period.YEAR: "This Year",
    Period.WEEK: "This Week",
}


def get_config(ctx: click.Context) -> ConfigManager:
    """Get the ConfigManager for this invocation."""
    config_path = ctx.obj.get("config_path")
    return ConfigManager(Path(config_path) if config_path else None)


def get_service(ctx: click.Context) -> ReportService:
    """Build a ReportService over a fresh snapshot of the data directory."""
    cfg = get_config(ctx)
    data_dir = ctx.obj.get("data_dir")
    storage = StorageManager(Path(data_dir) if data_dir else cfg.data_dir)
    snapshot = storage.load_snapshot(user_id=cfg.get("general.user_id"))
    return ReportService(
        snapshot,
        first_day_of_week=ctx.obj.get("week_start") or cfg.get("general.week_start", "monday"),
        cache=ReportCache(cfg.get("reports.cache_size", 128)),
    )


def get_generator(ctx: click.Context) -> ReportGenerator:
    cfg = get_config(ctx)
    return ReportGenerator(
        console,
        currency=cfg.get("display.currency", "USD"),
        time_format=cfg.get("display.time_format", "human"),
    )


def resolve_period(ctx: click.Context, period: Optional[str]) -> Period:
    """Use the given period or the configured default."""
    if period:
        return Period.parse(period)
    return Period.parse(get_config(ctx).get("reports.default_period", "30days"))


def parse_date(value: Optional[str], option: str) -> Optional[date]:
    """Parse a YYYY-MM-DD option value, exiting on bad input."""
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid date format for {option}. Use YYYY-MM-DD")
        sys.exit(1)


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


@click.group()
@click.version_option(version=__version__)
@click.option("--data-dir", help="Custom data directory", type=click.Path())
@click.option("--config", "config_path", help="Custom config file", type=click.Path())
@click.option(
    "--week-start",
    type=click.Choice(list(WEEKDAYS)),
    help="Override the configured first day of week",
)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Optional[str],
    config_path: Optional[str],
    week_start: Optional[str],
    no_color: bool,
    verbose: bool,
) -> None:
    """Time Ledger - earnings and productivity reports for tracked time.

    Summarize time entries by period, project and client.
    """
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    ctx.obj["config_path"] = config_path
    ctx.obj["week_start"] = week_start

    if no_color:
        console.no_color = True

    try:
        level = "DEBUG" if verbose else get_config(ctx).get("advanced.log_level", "WARNING")
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    setup_logging(level)


cli.add_command(config)


@cli.command()
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="Reporting period")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def summary(ctx: click.Context, period: Optional[str], as_json: bool) -> None:
    """Show totals, earnings chart, productivity and grouped breakdowns.

    Example:
        time-ledger summary --period quarter
    """
    try:
        resolved = resolve_period(ctx, period)
        report = get_service(ctx).summary(resolved)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json({**asdict(report), "has_data": report.has_data})
        return

    get_generator(ctx).summary_report(report, PERIOD_LABELS[resolved])


@cli.command()
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="Reporting period")
@click.option(
    "--metric",
    type=click.Choice([m.value for m in SeriesMetric]),
    default="earnings",
    help="Value per bucket",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def series(ctx: click.Context, period: Optional[str], metric: str, as_json: bool) -> None:
    """Show the chart series of a period.

    Example:
        time-ledger series --period 30days --metric duration
    """
    try:
        resolved = resolve_period(ctx, period)
        labels, values = get_service(ctx).series(resolved, metric)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json({"period": resolved.value, "metric": metric, "labels": labels, "values": values})
        return

    generator = get_generator(ctx)
    if metric == SeriesMetric.PRODUCTIVITY.value:
        for label, value in zip(labels, values):
            console.print(f"{label:>8}  {value:>3.0f}%")
        return
    generator.series_chart(
        labels, values, f"{metric.title()} - {PERIOD_LABELS[resolved]}", money=metric == "earnings"
    )


@cli.command()
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="Reporting period")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def trend(ctx: click.Context, period: Optional[str], as_json: bool) -> None:
    """Compare productivity with the previous period.

    Example:
        time-ledger trend --period year
    """
    try:
        result = get_service(ctx).trend(resolve_period(ctx, period))
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json(asdict(result))
        return

    get_generator(ctx).trend_panel(result)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def week(ctx: click.Context, as_json: bool) -> None:
    """Show time and earnings for each day of the current week."""
    try:
        report = get_service(ctx).week()
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json(asdict(report))
        return

    get_generator(ctx).week_report(report)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def today(ctx: click.Context, as_json: bool) -> None:
    """Show today's tracked, billable and earned totals."""
    try:
        stats = get_service(ctx).today()
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json(asdict(stats))
        return

    get_generator(ctx).today_report(stats)


@cli.command()
@click.option("--month", "month_value", help="Month to show (YYYY-MM, default current)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def calendar(ctx: click.Context, month_value: Optional[str], as_json: bool) -> None:
    """Show a month calendar with the time tracked each day.

    Example:
        time-ledger calendar --month 2024-02
    """
    year = month = None
    if month_value:
        try:
            parsed = datetime.strptime(month_value, "%Y-%m")
        except ValueError:
            error_console.print("[red]Error:[/red] Invalid month format. Use YYYY-MM")
            sys.exit(1)
        year, month = parsed.year, parsed.month

    try:
        grid = get_service(ctx).calendar(year, month)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json(
            {
                "year": grid.year,
                "month": grid.month,
                "weekdays": grid.weekdays,
                "total_time": grid.total_time,
                "weeks": [
                    [
                        None
                        if day is None
                        else {
                            "date": day.key,
                            "total_time": day.total_time,
                            "entries": len(day.entries),
                        }
                        for day in week
                    ]
                    for week in grid.weeks
                ],
            }
        )
        return

    get_generator(ctx).calendar_report(grid)


@cli.command()
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="Reporting period")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def projects(ctx: click.Context, period: Optional[str], as_json: bool) -> None:
    """Show totals per project, highest earnings first."""
    try:
        resolved = resolve_period(ctx, period)
        rows = get_service(ctx).projects(resolved)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json([asdict(row) for row in rows])
        return
    if not rows:
        console.print("[yellow]No project time found for this period[/yellow]")
        return

    get_generator(ctx).grouped_table(rows, f"Projects - {PERIOD_LABELS[resolved]}", "Project")


@cli.command()
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="Reporting period")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def clients(ctx: click.Context, period: Optional[str], as_json: bool) -> None:
    """Show totals per client, by client name."""
    try:
        resolved = resolve_period(ctx, period)
        rows = get_service(ctx).clients(resolved)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json([asdict(row) for row in rows])
        return
    if not rows:
        console.print("[yellow]No clients defined[/yellow]")
        return

    get_generator(ctx).grouped_table(rows, f"Clients - {PERIOD_LABELS[resolved]}", "Client")


@cli.command()
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="Reporting period")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def team(ctx: click.Context, period: Optional[str], as_json: bool) -> None:
    """Show totals per team member."""
    try:
        resolved = resolve_period(ctx, period)
        rows = get_service(ctx).team(resolved)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json([asdict(row) for row in rows])
        return
    if not rows:
        console.print("[yellow]No team members defined[/yellow]")
        return

    get_generator(ctx).grouped_table(rows, f"Team - {PERIOD_LABELS[resolved]}", "Member")


@cli.command()
@click.option(
    "--by", "compare_by", type=click.Choice([c.value for c in CompareBy]), default="projects"
)
@click.option("--from", "from_date", help="Start date (YYYY-MM-DD)")
@click.option("--to", "to_date", help="End date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def compare(
    ctx: click.Context,
    compare_by: str,
    from_date: Optional[str],
    to_date: Optional[str],
    as_json: bool,
) -> None:
    """Compare projects or clients over a date range.

    Example:
        time-ledger compare --by clients --from 2025-10-01 --to 2025-10-31
    """
    start = parse_date(from_date, "--from")
    end = parse_date(to_date, "--to")
    try:
        rows = get_service(ctx).compare(compare_by, start, end)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json([asdict(row) for row in rows])
        return
    if not rows:
        console.print("[yellow]No tracked time in this range[/yellow]")
        return

    get_generator(ctx).grouped_table(rows, f"Compare by {compare_by}", compare_by.title()[:-1])


@cli.command()
@click.option("--from", "from_date", help="Start date (YYYY-MM-DD)")
@click.option("--to", "to_date", help="End date (YYYY-MM-DD)")
@click.option("--client", "client_id", help="Filter by client id")
@click.option("-p", "--project", "project_id", help="Filter by project id")
@click.option(
    "--billable",
    type=click.Choice([b.value for b in BillableFilter]),
    default="all",
    help="Filter by billable status",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def detailed(
    ctx: click.Context,
    from_date: Optional[str],
    to_date: Optional[str],
    client_id: Optional[str],
    project_id: Optional[str],
    billable: str,
    as_json: bool,
) -> None:
    """List entries matching filters, with totals.

    Example:
        time-ledger detailed --from 2025-11-01 --billable billable
    """
    start = parse_date(from_date, "--from")
    end = parse_date(to_date, "--to")
    try:
        service = get_service(ctx)
        report = service.detailed(start, end, client_id, project_id, billable)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        print_json(
            {
                "entries": [entry.to_dict() for entry in report.entries],
                "totals": asdict(report.totals),
            }
        )
        return

    names = {p.id: p.name for p in service.snapshot.projects}
    get_generator(ctx).detailed_report(report, names)


@cli.command()
@click.option("--host", help="Host to bind (defaults to api.host)")
@click.option("--port", type=int, help="Port to bind (defaults to api.port)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Serve reports over HTTP.

    Example:
        time-ledger serve --port 8080
    """
    from time_ledger.api.server import run_server

    cfg = get_config(ctx)
    host = host or cfg.get("api.host", "localhost")
    port = port or cfg.get("api.port", 8000)

    console.print(f"[green]▶[/green]  Serving Time Ledger API on http://{host}:{port}")
    console.print(f"  Docs: http://{host}:{port}/docs")
    data_dir = ctx.obj.get("data_dir")
    run_server(
        host=host,
        port=port,
        reload=reload,
        config=cfg,
        data_dir=Path(data_dir) if data_dir else None,
        week_start=ctx.obj.get("week_start"),
    )


if __name__ == "__main__":
    cli(obj={})
