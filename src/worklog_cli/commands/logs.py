"""Manual time log commands."""

import typer
from rich.markup import escape
from rich.table import Table

from worklog_cli.services.config_service import get_task_store
from worklog_cli.utils.exit_codes import ERROR_INVALID_ARGS
from worklog_cli.utils.time_windows import format_ms
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.console import get_console
from worklog_cli.utils.ui.formatters import (
    format_elapsed,
    format_info,
    format_output,
    format_success,
)

from .decorators import AppError, command_wrapper
from .utils import current_timezone, parse_when, require_task, resolve_item_id, resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Edit recorded time logs")
console = get_console()


@app.command("list")
@command_wrapper
def list_logs(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List the time logs of a task."""
    output = resolve_output(output)
    store = get_task_store()
    task = require_task(store, task_ref)

    if output != "table":
        format_output(
            [log.model_dump(mode="json", by_alias=True) for log in task.time_logs],
            output,
        )
        return

    if not task.time_logs:
        format_info(f"No time logs for '{task.title}'")
        return

    tz = current_timezone()
    table = Table(title=escape(task.title), show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Duration", justify="right")
    for log in task.time_logs:
        table.add_row(
            log.id[-8:],
            format_ms(log.start_time, tz),
            format_ms(log.end_time, tz) if log.end_time is not None else "[blue]running[/blue]",
            format_elapsed(log.duration()),
        )
    console.print(table)
    console.print(f"Total: [bold]{format_elapsed(task.total_time_spent)}[/bold]")


@app.command("add")
@command_wrapper
def add_log(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    start: str = typer.Option(..., "--start", help="Start (YYYY-MM-DD HH:MM)"),
    end: str = typer.Option(..., "--end", help="End (YYYY-MM-DD HH:MM)"),
) -> None:
    """Record a finished interval of work."""
    store = get_task_store()
    tz = current_timezone()
    task = require_task(store, task_ref)

    start_ms = parse_when(start, tz)
    end_ms = parse_when(end, tz)
    if end_ms < start_ms:
        raise AppError("End must not be before start", ERROR_INVALID_ARGS)

    log = store.add_time_log(task.id, start_ms, end_ms)
    format_success(f"Time log added to '{task.title}' ({format_elapsed(log.duration())})")


@app.command("edit")
@command_wrapper
def edit_log(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    log_ref: str = typer.Argument(..., help="Time log ID or suffix"),
    start: str | None = typer.Option(None, "--start", help="New start (YYYY-MM-DD HH:MM)"),
    end: str | None = typer.Option(None, "--end", help="New end (YYYY-MM-DD HH:MM)"),
) -> None:
    """Move the start and/or end of a time log."""
    store = get_task_store()
    tz = current_timezone()
    task = require_task(store, task_ref)
    log_id = resolve_item_id([log.id for log in task.time_logs], log_ref, "time log")
    current = next(log for log in task.time_logs if log.id == log_id)

    start_ms = parse_when(start, tz) if start else current.start_time
    end_ms = parse_when(end, tz) if end else None
    effective_end = end_ms if end_ms is not None else current.end_time
    if effective_end is not None and effective_end < start_ms:
        raise AppError("End must not be before start", ERROR_INVALID_ARGS)

    store.update_time_log(task.id, log_id, start_ms, end_ms)
    format_success(f"Time log updated on '{task.title}'")


@app.command("delete")
@command_wrapper
def delete_log(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    log_ref: str = typer.Argument(..., help="Time log ID or suffix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a time log."""
    store = get_task_store()
    task = require_task(store, task_ref)
    log_id = resolve_item_id([log.id for log in task.time_logs], log_ref, "time log")

    if not yes and not typer.confirm(f"Delete time log {log_id} of '{task.title}'?"):
        format_info("Cancelled")
        raise typer.Exit(0)

    store.delete_time_log(task.id, log_id)
    format_success("Time log deleted")
