"""Time tracking commands."""

import typer
from rich.markup import escape

from worklog_cli.services.config_service import get_task_store
from worklog_cli.utils.time_windows import format_ms
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.console import get_console
from worklog_cli.utils.ui.formatters import format_elapsed, format_info, format_success

from .decorators import command_wrapper
from .utils import current_timezone, require_task

app = typer.Typer(cls=SuggestingGroup, help="Start and stop the task timer")
console = get_console()


@app.command("start")
@command_wrapper
def start_timer(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
) -> None:
    """Start timing a task. Whatever was running is paused first."""
    store = get_task_store()
    task = require_task(store, task_ref)

    previous = store.active_task()
    started = store.start_timer(task.id)

    if previous is not None and previous.id != task.id:
        format_info(f"Paused: {previous.title}")
    format_success(f"Timer started: {started.title}")


@app.command("stop")
@command_wrapper
def stop_timer(
    task_ref: str | None = typer.Argument(
        None, help="Task ID or suffix (default: the running task)"
    ),
) -> None:
    """Stop the running timer."""
    store = get_task_store()

    if task_ref:
        task = require_task(store, task_ref)
    else:
        running = store.open_time_log()
        if running is None:
            format_info("No timer is running")
            return
        task = running[0]

    if task.open_log() is None:
        format_info(f"No timer is running for '{task.title}'")
        return

    stopped = store.stop_timer(task.id)
    format_success(
        f"Timer stopped: {stopped.title} (total {format_elapsed(stopped.total_time_spent)})"
    )


@app.command("status")
@command_wrapper
def timer_status() -> None:
    """Show the running timer, if any."""
    store = get_task_store()
    running = store.open_time_log()
    if running is None:
        format_info("No timer is running")
        return

    task, log = running
    tz = current_timezone()
    elapsed = store.clock() - log.start_time
    console.print(f"[bold blue]Running:[/bold blue] {escape(task.title)}")
    console.print(f"Started: {format_ms(log.start_time, tz)}")
    console.print(f"Current session: {format_elapsed(elapsed)}")
    console.print(f"Total before this session: {format_elapsed(task.total_time_spent)}")
