"""Category vocabulary commands."""

from enum import Enum

import typer
from rich.markup import escape
from rich.table import Table

from worklog_cli.services.config_service import get_task_store
from worklog_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.console import get_console
from worklog_cli.utils.ui.formatters import format_output, format_success, format_warning

from .decorators import AppError, command_wrapper
from .utils import resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Manage primary and secondary categories")
console = get_console()


class Kind(str, Enum):
    main = "main"
    sub = "sub"


def _names(store, kind: Kind) -> list[str]:
    return store.main_categories if kind == Kind.main else store.sub_categories


@app.command("list")
@command_wrapper
def list_categories(
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show both category vocabularies with how many tasks use each name."""
    output = resolve_output(output)
    store = get_task_store()

    if output != "table":
        format_output(
            {"mainCategories": store.main_categories, "subCategories": store.sub_categories},
            output,
        )
        return

    tasks = store.tasks
    for kind, title, field in (
        (Kind.main, "Primary categories", "main_category"),
        (Kind.sub, "Secondary categories", "sub_category"),
    ):
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Name")
        table.add_column("Tasks", justify="right")
        for name in _names(store, kind):
            used = sum(1 for t in tasks if getattr(t, field) == name)
            table.add_row(escape(name), str(used))
        console.print(table)


@app.command("add")
@command_wrapper
def add_category(
    kind: Kind = typer.Argument(..., help="Vocabulary: main or sub"),
    name: str = typer.Argument(..., help="Category name"),
) -> None:
    """Add a category name."""
    if not name.strip():
        raise AppError("Category name cannot be empty", ERROR_INVALID_ARGS)

    store = get_task_store()
    if name.strip() in _names(store, kind):
        format_warning(f"'{name.strip()}' already exists")
        return

    store.add_category(kind.value, name)
    format_success(f"Added {kind.value} category '{name.strip()}'")


@app.command("rename")
@command_wrapper
def rename_category(
    kind: Kind = typer.Argument(..., help="Vocabulary: main or sub"),
    old: str = typer.Argument(..., help="Current name"),
    new: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a category; tasks using the old name follow."""
    store = get_task_store()
    if old not in _names(store, kind):
        raise AppError(f"No {kind.value} category named '{old}'", ERROR_NOT_FOUND)
    if not new.strip():
        raise AppError("Category name cannot be empty", ERROR_INVALID_ARGS)

    store.rename_category(kind.value, old, new)
    format_success(f"Renamed {kind.value} category '{old}' to '{new.strip()}'")


@app.command("delete")
@command_wrapper
def delete_category(
    kind: Kind = typer.Argument(..., help="Vocabulary: main or sub"),
    name: str = typer.Argument(..., help="Category name"),
) -> None:
    """Remove a category name. Tasks keep their current value."""
    store = get_task_store()
    if name not in _names(store, kind):
        raise AppError(f"No {kind.value} category named '{name}'", ERROR_NOT_FOUND)

    store.delete_category(kind.value, name)
    field = "main_category" if kind == Kind.main else "sub_category"
    still_used = sum(1 for t in store.tasks if getattr(t, field) == name)
    format_success(f"Deleted {kind.value} category '{name}'")
    if still_used:
        format_warning(f"{still_used} task(s) still use '{name}'")
