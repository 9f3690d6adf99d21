"""Task management commands."""

from __future__ import annotations

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from worklog_cli.models import MAX_DEPTH, TaskCreate, TaskFilters, TaskStatus, TaskUpdate
from worklog_cli.services.config_service import get_config_service, get_task_store
from worklog_cli.utils.exit_codes import ERROR_INVALID_ARGS
from worklog_cli.utils.hierarchy import (
    can_add_child,
    index_tasks,
    parent_candidates,
    subtree_ids,
    would_create_cycle,
)
from worklog_cli.utils.intervals import actual_dates
from worklog_cli.utils.task_filters import apply_filters
from worklog_cli.utils.task_helpers import short_ids
from worklog_cli.utils.time_windows import end_of_day, format_ms, start_of_day
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.console import get_console
from worklog_cli.utils.ui.formatters import (
    format_elapsed,
    format_info,
    format_output,
    format_single_item,
    format_success,
)

from .decorators import AppError, command_wrapper
from .utils import (
    category_pair,
    current_timezone,
    parse_day,
    parse_when,
    require_task,
    resolve_output,
    task_to_dict,
)

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")
console = get_console()

_STATUS_STYLES = {
    TaskStatus.TODO: "white",
    TaskStatus.IN_PROGRESS: "bold blue",
    TaskStatus.PAUSED: "yellow",
    TaskStatus.DONE: "green",
}

# Sentinel accepted by edit options that clear a value
_CLEAR = "none"


def _status_text(status: TaskStatus) -> str:
    return f"[{_STATUS_STYLES[status]}]{status.value}[/{_STATUS_STYLES[status]}]"


@app.command("add")
@command_wrapper
def add_task(
    title: str = typer.Argument(..., help="Task title"),
    alias: str = typer.Option("", "--alias", "-a", help="Short alias (max 10 chars)"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    main_category: str = typer.Option("", "--main", "-m", help="Primary category"),
    sub_category: str = typer.Option("", "--sub", "-s", help="Secondary category"),
    parent: str | None = typer.Option(None, "--parent", "-p", help="Parent task ID or suffix"),
    start: str | None = typer.Option(None, "--start", help="Estimated start (YYYY-MM-DD [HH:MM])"),
    end: str | None = typer.Option(None, "--end", help="Estimated end (YYYY-MM-DD [HH:MM])"),
    assignee: str = typer.Option("", "--assignee", help="Assignee"),
    reporter: str = typer.Option("", "--reporter", help="Reporter"),
    status: TaskStatus = typer.Option(
        TaskStatus.TODO, "--status", help="Initial status (IN_PROGRESS starts the timer)"
    ),
    labels: list[str] | None = typer.Option(None, "--label", "-l", help="Label (repeat, max 3)"),
) -> None:
    """Create a new task."""
    store = get_task_store()
    tz = current_timezone()

    parent_id = None
    if parent:
        parent_task = require_task(store, parent)
        if not can_add_child(parent_task, store.tasks):
            raise AppError(
                f"Cannot add a subtask to '{parent_task.title}': maximum depth is {MAX_DEPTH}",
                ERROR_INVALID_ARGS,
            )
        parent_id = parent_task.id

    if not title.strip():
        raise AppError("Task title cannot be empty", ERROR_INVALID_ARGS)

    task = store.create_task(
        TaskCreate(
            title=title.strip(),
            alias_title=alias,
            description=description,
            main_category=main_category,
            sub_category=sub_category,
            parent_id=parent_id,
            estimated_start_date=parse_when(start, tz) if start else None,
            estimated_end_date=parse_when(end, tz) if end else None,
            assignee=assignee,
            reporter=reporter,
            status=status,
        )
    )
    if labels:
        task = store.update_task(task.id, TaskUpdate(labels=labels))

    format_success(f"Task created: {task.title} ({task.id})")


@app.command("list")
@command_wrapper
def list_tasks(
    statuses: list[TaskStatus] | None = typer.Option(
        None, "--status", help="Status to include (repeatable; default: unfinished)"
    ),
    show_all: bool = typer.Option(False, "--all", help="Include every status"),
    main_categories: list[str] | None = typer.Option(None, "--main", "-m", help="Primary category"),
    sub_categories: list[str] | None = typer.Option(None, "--sub", "-s", help="Secondary category"),
    labels: list[str] | None = typer.Option(None, "--label", "-l", help="Label (any match)"),
    date_from: str | None = typer.Option(None, "--from", help="Estimated no earlier than (YYYY-MM-DD)"),
    date_to: str | None = typer.Option(None, "--to", help="Estimated no later than (YYYY-MM-DD)"),
    search: str | None = typer.Option(None, "--search", help="Search title and alias"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List tasks as a numbered work breakdown structure."""
    output = resolve_output(output)
    store = get_task_store()
    tz = current_timezone()
    other = get_config_service().config.reports.other_label

    filters = TaskFilters(
        main_categories=main_categories or [],
        sub_categories=sub_categories or [],
        labels=labels or [],
        search=search,
    )
    if show_all:
        filters.statuses = []
    elif statuses:
        filters.statuses = list(statuses)
    if date_from:
        filters.estimated_after = start_of_day(parse_day(date_from, None), tz)
    if date_to:
        filters.estimated_before = end_of_day(parse_day(date_to, None), tz)

    tasks = store.tasks
    indexed = index_tasks(apply_filters(tasks, filters, other))

    if output != "table":
        format_output(
            [
                {"index": e.index, "depth": e.depth, **task_to_dict(e.task)}
                for e in indexed
            ],
            output,
        )
        return

    if not indexed:
        format_info("No tasks found")
        return

    suffixes = short_ids(tasks)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("WBS", style="bold")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Status")
    table.add_column("Estimated")
    table.add_column("Actual")
    table.add_column("Time", justify="right")
    table.add_column("ID", style="dim")

    for entry in indexed:
        task = entry.task
        title = "  " * (entry.depth - 1) + escape(task.title)
        if task.alias_title:
            title += f" [dim]({escape(task.alias_title)})[/dim]"
        estimated = (
            f"{format_ms(task.estimated_start_date, tz, '%Y-%m-%d')}"
            f" → {format_ms(task.estimated_end_date, tz, '%Y-%m-%d')}"
        )
        actual_start, actual_end = actual_dates(task)
        actual = (
            f"{format_ms(actual_start, tz, '%Y-%m-%d')}"
            f" → {format_ms(actual_end, tz, '%Y-%m-%d')}"
        )
        table.add_row(
            entry.index,
            title,
            escape(category_pair(task, other)),
            _status_text(task.status),
            estimated,
            actual,
            format_elapsed(task.total_time_spent),
            suffixes[task.id],
        )

    console.print(table)


@app.command("tree")
@command_wrapper
def show_tree(
    show_all: bool = typer.Option(False, "--all", help="Include finished tasks"),
) -> None:
    """Show tasks as a tree."""
    store = get_task_store()
    filters = TaskFilters()
    if show_all:
        filters.statuses = []
    indexed = index_tasks(apply_filters(store.tasks, filters))
    if not indexed:
        format_info("No tasks found")
        return

    root = Tree("[bold]Tasks[/bold]")
    nodes: dict[int, Tree] = {0: root}
    for entry in indexed:
        label = (
            f"[bold]{entry.index}[/bold] {escape(entry.task.title)} "
            f"{_status_text(entry.task.status)} "
            f"[dim]{format_elapsed(entry.task.total_time_spent)}[/dim]"
        )
        nodes[entry.depth] = nodes[entry.depth - 1].add(label)

    console.print(root)


@app.command("show")
@command_wrapper
def show_task(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show task details with its time logs and outputs."""
    output = resolve_output(output)
    store = get_task_store()
    task = require_task(store, task_ref)

    if output != "table":
        format_output(task_to_dict(task), output)
        return

    tz = current_timezone()
    other = get_config_service().config.reports.other_label
    parent = store.get_task_by_id(task.parent_id) if task.parent_id else None
    actual_start, actual_end = actual_dates(task)
    format_single_item(
        {
            "id": task.id,
            "title": task.title,
            "alias": task.alias_title or None,
            "description": task.description or None,
            "category": category_pair(task, other),
            "status": task.status.value,
            "parent": parent.title if parent else None,
            "children": len(store.get_children(task.id)),
            "estimated_start": format_ms(task.estimated_start_date, tz),
            "estimated_end": format_ms(task.estimated_end_date, tz),
            "actual_start": format_ms(actual_start or task.actual_start_date, tz),
            "actual_end": format_ms(actual_end or task.actual_end_date, tz),
            "assignee": task.assignee or None,
            "reporter": task.reporter or None,
            "labels": task.labels,
            "total_time": format_elapsed(task.total_time_spent),
        }
    )

    if task.time_logs:
        logs = Table(title="Time logs", show_header=True, header_style="bold magenta")
        logs.add_column("ID", style="dim")
        logs.add_column("Start")
        logs.add_column("End")
        logs.add_column("Duration", justify="right")
        for log in task.time_logs:
            logs.add_row(
                log.id[-8:],
                format_ms(log.start_time, tz),
                format_ms(log.end_time, tz) if log.end_time is not None else "[blue]running[/blue]",
                format_elapsed(log.duration()),
            )
        console.print(logs)

    if task.outputs:
        outputs = Table(title="Outputs", show_header=True, header_style="bold magenta")
        outputs.add_column("ID", style="dim")
        outputs.add_column("Name")
        outputs.add_column("Link")
        outputs.add_column("Done", justify="right")
        for out in task.outputs:
            outputs.add_row(
                out.id[-8:],
                escape(out.name),
                escape(out.link or "-"),
                f"{out.completeness}%" if out.completeness else "-",
            )
        console.print(outputs)


@app.command("edit")
@command_wrapper
def edit_task(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    alias: str | None = typer.Option(None, "--alias", "-a", help="Short alias (max 10 chars)"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
    main_category: str | None = typer.Option(None, "--main", "-m", help="Primary category"),
    sub_category: str | None = typer.Option(None, "--sub", "-s", help="Secondary category"),
    parent: str | None = typer.Option(
        None, "--parent", "-p", help=f"New parent ID or suffix ('{_CLEAR}' to detach)"
    ),
    start: str | None = typer.Option(None, "--start", help=f"Estimated start ('{_CLEAR}' to clear)"),
    end: str | None = typer.Option(None, "--end", help=f"Estimated end ('{_CLEAR}' to clear)"),
    actual_end: str | None = typer.Option(None, "--actual-end", help=f"Actual end ('{_CLEAR}' to clear)"),
    assignee: str | None = typer.Option(None, "--assignee", help="Assignee"),
    reporter: str | None = typer.Option(None, "--reporter", help="Reporter"),
    status: TaskStatus | None = typer.Option(
        None, "--status", help="Status (IN_PROGRESS starts the timer, leaving it stops it)"
    ),
    labels: list[str] | None = typer.Option(None, "--label", "-l", help="Replace labels (repeat, max 3)"),
    clear_labels: bool = typer.Option(False, "--clear-labels", help="Remove all labels"),
) -> None:
    """Edit task fields. Only the given options are changed."""
    store = get_task_store()
    tz = current_timezone()
    task = require_task(store, task_ref)

    fields: dict = {}
    for name, value in (
        ("title", title),
        ("alias_title", alias),
        ("description", description),
        ("main_category", main_category),
        ("sub_category", sub_category),
        ("assignee", assignee),
        ("reporter", reporter),
        ("status", status),
    ):
        if value is not None:
            fields[name] = value

    if title is not None and not title.strip():
        raise AppError("Task title cannot be empty", ERROR_INVALID_ARGS)

    for name, value in (
        ("estimated_start_date", start),
        ("estimated_end_date", end),
        ("actual_end_date", actual_end),
    ):
        if value is not None:
            fields[name] = None if value.lower() == _CLEAR else parse_when(value, tz)

    if parent is not None:
        if parent.lower() == _CLEAR:
            fields["parent_id"] = None
        else:
            new_parent = require_task(store, parent)
            if would_create_cycle(task.id, new_parent.id, store.tasks):
                raise AppError(
                    f"'{new_parent.title}' is this task or one of its subtasks",
                    ERROR_INVALID_ARGS,
                )
            allowed = {t.id for t in parent_candidates(task.id, store.tasks)}
            if new_parent.id not in allowed:
                raise AppError(
                    f"Cannot move under '{new_parent.title}': maximum depth is {MAX_DEPTH}",
                    ERROR_INVALID_ARGS,
                )
            fields["parent_id"] = new_parent.id

    if clear_labels:
        fields["labels"] = []
    elif labels:
        fields["labels"] = labels

    if not fields:
        format_info("Nothing to change")
        return

    updated = store.update_task(task.id, TaskUpdate(**fields))
    format_success(f"Task updated: {updated.title}")


@app.command("delete")
@command_wrapper
def delete_task(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task together with all of its subtasks."""
    store = get_task_store()
    task = require_task(store, task_ref)

    subtasks = len(subtree_ids(task.id, store.tasks)) - 1
    if not yes:
        msg = f"Delete '{task.title}'"
        if subtasks:
            msg += f" and {subtasks} subtask(s)"
        if not typer.confirm(f"{msg}?"):
            format_info("Cancelled")
            raise typer.Exit(0)

    removed = store.delete_task(task.id)
    format_success(f"Deleted {len(removed)} task(s)")
