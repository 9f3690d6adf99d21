"""Configuration management commands."""

from typing import Any

import typer
from pydantic import ValidationError

from worklog_cli.services.config_service import get_config_service
from worklog_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from worklog_cli.utils.typer_helpers import SuggestingGroup
from worklog_cli.utils.ui.console import get_console
from worklog_cli.utils.ui.formatters import format_info, format_output, format_success

from .decorators import AppError, command_wrapper
from .utils import resolve_output

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


def parse_value(raw: str, current: Any) -> Any:
    """Convert command-line text to the type of the current setting."""
    if raw.lower() in ("null", "none") and not isinstance(current, (bool, int, list)):
        return None
    if isinstance(current, list):
        items = [part.strip() for part in raw.split(",") if part.strip()]
        if all(item.lstrip("-").isdigit() for item in items) and all(
            isinstance(v, int) for v in current
        ):
            return [int(item) for item in items]
        return items
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    if raw.lstrip("-").isdigit():
        return int(raw)
    return raw


def _lookup(key: str) -> Any:
    try:
        return get_config_service().get(key)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found", ERROR_NOT_FOUND) from e


@app.command("show")
@command_wrapper
def show_config(
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    output = resolve_output(output)
    svc = get_config_service()
    data = svc.config.model_dump(mode="json")
    if output == "table":
        flat = {
            f"{section}.{key}": value
            for section, values in data.items()
            for key, value in values.items()
        }
        format_output(flat, "table")
        console.print(f"[dim]{svc.config_path}[/dim]")
    else:
        format_output(data, output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., ui.timezone)"),
) -> None:
    """Get a configuration value."""
    value = _lookup(key)
    if hasattr(value, "model_dump"):
        format_output(value.model_dump(mode="json"), "table")
    else:
        console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., ui.timezone)"),
    value: str = typer.Argument(..., help="Configuration value (lists comma-separated)"),
) -> None:
    """Set a configuration value."""
    current = _lookup(key)
    if hasattr(current, "model_dump"):
        raise AppError(f"'{key}' is a section; set one of its keys", ERROR_INVALID_ARGS)

    parsed = parse_value(value, current)
    try:
        stored = get_config_service().set(key, parsed)
    except ValidationError as e:
        raise AppError(
            f"Invalid value for '{key}': {e.errors()[0]['msg']}", ERROR_INVALID_ARGS
        ) from e
    format_success(f"Configuration '{key}' set to '{stored}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if key:
        _lookup(key)
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            format_info("Cancelled")
            raise typer.Exit(0)

    get_config_service().reset(key)
    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")
