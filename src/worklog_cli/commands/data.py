"""Data management commands (backup, restore, category files)."""

from pathlib import Path

import typer

from worklog_cli.services.config_service import get_task_store
from worklog_cli.services.data_service import (
    CATEGORIES_FILE_NAME,
    DataService,
    backup_file_name,
    parse_full_backup,
    read_json,
)
from worklog_cli.utils.time_windows import today
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.formatters import format_info, format_success, format_warning

from .decorators import command_wrapper
from .utils import current_timezone

app = typer.Typer(cls=SuggestingGroup, help="Data management commands")


@app.command("export")
@command_wrapper
def export_data(
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (default: task_tracker_backup_{date}.json)",
    ),
) -> None:
    """
    Export every task and both category lists to one JSON file.

    Examples:
        worklog data export
        worklog data export --output backup.json
    """
    service = DataService(get_task_store())
    path = output or Path(backup_file_name(today(current_timezone())))
    service.export_full_file(path)
    format_success(f"Exported {len(service.store.tasks)} task(s) to {path}")


@app.command("import")
@command_wrapper
def import_data(
    path: Path = typer.Argument(..., help="Backup file created by 'worklog data export'"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Replace ALL tasks and categories with the contents of a backup file."""
    service = DataService(get_task_store())

    # Validate before asking, so a bad file never gets as far as the prompt
    payload = read_json(path)
    snapshot = parse_full_backup(payload)

    if not yes:
        format_warning("This overwrites every task and category currently stored.")
        if not typer.confirm(f"Restore {len(snapshot.tasks)} task(s) from {path}?"):
            format_info("Cancelled")
            raise typer.Exit(0)

    service.import_full(payload)
    format_success(f"Restored {len(snapshot.tasks)} task(s) from {path}")


@app.command("export-categories")
@command_wrapper
def export_categories(
    output: Path = typer.Option(
        Path(CATEGORIES_FILE_NAME), "--output", "-o", help="Output file path"
    ),
) -> None:
    """Export the two category lists."""
    service = DataService(get_task_store())
    service.export_categories_file(output)
    format_success(f"Exported categories to {output}")


@app.command("import-categories")
@command_wrapper
def import_categories(
    path: Path = typer.Argument(..., help="Category file"),
) -> None:
    """Replace both category lists. Tasks are not changed."""
    service = DataService(get_task_store())
    data = service.import_categories_file(path)
    format_success(
        f"Imported {len(data.main_categories)} primary and "
        f"{len(data.sub_categories)} secondary categories"
    )
