"""Work output commands."""

import typer

from worklog_cli.models import WorkOutputUpdate
from worklog_cli.services.config_service import get_task_store
from worklog_cli.utils.exit_codes import ERROR_INVALID_ARGS
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper
from .utils import require_task, resolve_item_id

app = typer.Typer(cls=SuggestingGroup, help="Track work outputs of a task")


@app.command("add")
@command_wrapper
def add_output(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    name: str = typer.Argument(..., help="Output name"),
    link: str | None = typer.Option(None, "--link", help="URL or path"),
    completeness: str = typer.Option("", "--completeness", "-c", help="Completeness (0-100)"),
) -> None:
    """Attach a work output to a task."""
    store = get_task_store()
    task = require_task(store, task_ref)
    if not name.strip():
        raise AppError("Output name cannot be empty", ERROR_INVALID_ARGS)

    output = store.add_output(task.id, name.strip(), link or None, completeness)
    format_success(f"Output added to '{task.title}': {output.name} ({output.id})")


@app.command("edit")
@command_wrapper
def edit_output(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    output_ref: str = typer.Argument(..., help="Output ID or suffix"),
    name: str | None = typer.Option(None, "--name", help="New name"),
    link: str | None = typer.Option(None, "--link", help="New link ('' to clear)"),
    completeness: str | None = typer.Option(
        None, "--completeness", "-c", help="Completeness (0-100, '' to clear)"
    ),
) -> None:
    """Edit a work output. Completeness is clamped to 0-100."""
    store = get_task_store()
    task = require_task(store, task_ref)
    output_id = resolve_item_id([o.id for o in task.outputs], output_ref, "output")

    fields: dict = {}
    if name is not None:
        if not name.strip():
            raise AppError("Output name cannot be empty", ERROR_INVALID_ARGS)
        fields["name"] = name.strip()
    if link is not None:
        fields["link"] = link or None
    if completeness is not None:
        fields["completeness"] = completeness

    if not fields:
        format_info("Nothing to change")
        return

    updated = store.update_output(task.id, output_id, WorkOutputUpdate(**fields))
    shown = f"{updated.completeness}%" if updated.completeness else "-"
    format_success(f"Output updated: {updated.name} ({shown})")


@app.command("delete")
@command_wrapper
def delete_output(
    task_ref: str = typer.Argument(..., help="Task ID or suffix"),
    output_ref: str = typer.Argument(..., help="Output ID or suffix"),
) -> None:
    """Remove a work output from a task."""
    store = get_task_store()
    task = require_task(store, task_ref)
    output_id = resolve_item_id([o.id for o in task.outputs], output_ref, "output")

    store.delete_output(task.id, output_id)
    format_success("Output deleted")
