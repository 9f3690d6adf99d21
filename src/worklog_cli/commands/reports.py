"""Report commands: category statistics, output tracking, WBS/Gantt and calendar."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from worklog_cli.services.config_service import get_config_service, get_task_store
from worklog_cli.services.report_service import ReportService
from worklog_cli.utils.exit_codes import ERROR_INVALID_ARGS
from worklog_cli.utils.intervals import CategorySlice
from worklog_cli.utils.time_windows import MS_PER_MINUTE, format_ms
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.console import get_console
from worklog_cli.utils.ui.formatters import (
    format_duration_minutes,
    format_hours_minutes,
    format_info,
    format_output,
    format_success,
    render_progress_bar,
)

from .decorators import AppError, command_wrapper
from .utils import current_timezone, parse_day, resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Reports and diagram sources")
console = get_console()


class View(str, Enum):
    day = "day"
    week5 = "week5"
    week7 = "week7"


def _report_service() -> ReportService:
    config = get_config_service().config
    return ReportService(get_task_store(), config.reports, tz=current_timezone())


def _slices_table(title: str, slices: list[CategorySlice]) -> Table:
    total = sum(s.minutes for s in slices)
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Category")
    table.add_column("Time", justify="right")
    table.add_column("Share")
    for s in slices:
        pct = s.minutes * 100 / total if total else 0
        table.add_row(
            escape(s.name),
            format_duration_minutes(s.minutes),
            f"{render_progress_bar(s.minutes, total, width=20)} {pct:.0f}%",
        )
    return table


def _emit(source: str, path: Path | None) -> None:
    if path is None:
        print(source)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source + "\n", encoding="utf-8")
    format_success(f"Wrote {path}")


def _check_levels(levels: list[int] | None) -> list[int] | None:
    if levels and any(level < 1 or level > 5 for level in levels):
        raise AppError("Levels must be between 1 and 5", ERROR_INVALID_ARGS)
    return levels or None


@app.command("stats")
@command_wrapper
def category_stats(
    date_from: str | None = typer.Option(None, "--from", help="First day (YYYY-MM-DD, default today)"),
    date_to: str | None = typer.Option(None, "--to", help="Last day (YYYY-MM-DD, default --from)"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Time spent per primary and secondary category."""
    output = resolve_output(output)
    service = _report_service()
    first = parse_day(date_from, service.today())
    last = parse_day(date_to, first)
    if last < first:
        raise AppError("--to must not be before --from", ERROR_INVALID_ARGS)

    breakdown = service.category_stats(first, last)

    if output != "table":
        format_output(
            {
                "from": first.isoformat(),
                "to": last.isoformat(),
                "main": [{"name": s.name, "minutes": s.minutes} for s in breakdown.main],
                "sub": [{"name": s.name, "minutes": s.minutes} for s in breakdown.sub],
            },
            output,
        )
        return

    if not breakdown.main:
        format_info(f"No time recorded between {first} and {last}")
        return

    console.print(
        f"[bold]{first} → {last}[/bold]  total "
        f"[cyan]{format_duration_minutes(breakdown.total_minutes)}[/cyan]"
    )
    console.print(_slices_table("Primary categories", breakdown.main))
    console.print(_slices_table("Secondary categories", breakdown.sub))


@app.command("outputs")
@command_wrapper
def output_report(
    date_from: str | None = typer.Option(None, "--from", help="First day (default: start of this week)"),
    date_to: str | None = typer.Option(None, "--to", help="Last day (default: end of this week)"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Work outputs of every task worked on in the period."""
    output = resolve_output(output)
    service = _report_service()
    default_first, default_last = service.default_output_window()
    first = parse_day(date_from, default_first)
    last = parse_day(date_to, default_last)
    report = service.output_report(first, last)
    other = service.config.other_label

    if output != "table":
        format_output(
            [
                {
                    "index": row.entry.index,
                    "id": row.entry.task.id,
                    "title": row.entry.task.title,
                    "mainCategory": row.entry.task.main_category or other,
                    "subCategory": row.entry.task.sub_category or other,
                    "totalTimeSpent": row.entry.task.total_time_spent,
                    "timeInRange": row.time_in_range,
                    "outputs": [
                        o.model_dump(mode="json", by_alias=True)
                        for o in row.entry.task.outputs
                    ],
                }
                for row in report.rows
            ],
            output,
        )
        return

    if not report.rows:
        format_info(f"No work recorded between {first} and {last}")
        return

    table = Table(
        title=f"Outputs {first} → {last}", show_header=True, header_style="bold magenta"
    )
    table.add_column("WBS", style="bold")
    table.add_column("Task")
    table.add_column("Category")
    table.add_column("Total", justify="right")
    table.add_column("In period", justify="right")
    table.add_column("Output")
    table.add_column("Done", justify="right")

    for row in report.rows:
        task = row.entry.task
        outputs = task.outputs or [None]
        for i, out in enumerate(outputs):
            first_line = i == 0
            table.add_row(
                row.entry.index if first_line else "",
                escape(task.title) if first_line else "",
                escape(f"{task.main_category or other} / {task.sub_category or other}")
                if first_line
                else "",
                format_hours_minutes(task.total_time_spent) if first_line else "",
                format_hours_minutes(row.time_in_range) if first_line else "",
                escape(out.name) if out else "[dim]no outputs[/dim]",
                f"{out.completeness}%" if out and out.completeness else "",
            )
    console.print(table)


@app.command("wbs")
@command_wrapper
def wbs_source(
    today: str | None = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
    levels: list[int] | None = typer.Option(None, "--level", help="Depth to include (repeatable)"),
    exclude_main: list[str] | None = typer.Option(None, "--exclude-main", help="Primary category to leave out"),
    exclude_sub: list[str] | None = typer.Option(
        None, "--exclude-sub", help="Secondary category to leave out (replaces the keyword defaults)"
    ),
    file: Path | None = typer.Option(None, "--file", "-f", help="Write to a file instead of stdout"),
) -> None:
    """PlantUML WBS source for the weekly report."""
    service = _report_service()
    day = parse_day(today, service.today())
    report = service.weekly_report(
        day,
        levels=_check_levels(levels),
        excluded_main=exclude_main,
        excluded_sub=exclude_sub,
    )
    _emit(report.wbs_source, file)


@app.command("gantt")
@command_wrapper
def gantt_source(
    today: str | None = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
    levels: list[int] | None = typer.Option(None, "--level", help="Depth to include (repeatable)"),
    file: Path | None = typer.Option(None, "--file", "-f", help="Write to a file instead of stdout"),
) -> None:
    """PlantUML Gantt source for the weekly report."""
    service = _report_service()
    day = parse_day(today, service.today())
    report = service.weekly_report(day, levels=_check_levels(levels))
    _emit(report.gantt_source, file)


@app.command("calendar")
@command_wrapper
def calendar_view(
    day: str | None = typer.Option(None, "--day", help="Day to show (YYYY-MM-DD, default today)"),
    view: View = typer.Option(View.week7, "--view", help="day, week5 or week7"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Logged work per day, like a calendar."""
    output = resolve_output(output)
    service = _report_service()
    tz = service.tz
    selected = parse_day(day, service.today())
    days = service.calendar(selected, view.value)

    if output != "table":
        format_output(
            [
                {
                    "day": d.day.isoformat(),
                    "slots": [
                        {
                            "taskId": s.task_id,
                            "title": s.task_title,
                            "start": s.start_time,
                            "end": s.end_time,
                            "running": s.running,
                        }
                        for s in d.slots
                    ],
                }
                for d in days
            ],
            output,
        )
        return

    for d in days:
        minutes = sum(s.end_time - s.start_time for s in d.slots) // MS_PER_MINUTE
        console.print(
            f"[bold cyan]{d.day:%a %Y-%m-%d}[/bold cyan]  {format_duration_minutes(minutes)}"
        )
        if not d.slots:
            console.print("  [dim]nothing logged[/dim]")
            continue
        for s in d.slots:
            name = s.alias_title or s.task_title
            marker = " [blue](running)[/blue]" if s.running else ""
            console.print(
                f"  {format_ms(s.start_time, tz, '%H:%M')}-{format_ms(s.end_time, tz, '%H:%M')}"
                f"  {escape(name)}{marker}"
            )
