"""Shared helpers for command modules."""

from __future__ import annotations

from datetime import date, tzinfo

from worklog_cli.models import Task
from worklog_cli.services.config_service import get_config_service
from worklog_cli.services.task_store import TaskStore
from worklog_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from worklog_cli.utils.task_helpers import resolve_task_id
from worklog_cli.utils.time_windows import parse_date, parse_datetime

from .decorators import AppError

OUTPUT_FORMATS = ("table", "json", "yaml")


def current_timezone() -> tzinfo:
    try:
        return get_config_service().timezone
    except KeyError as e:
        raise AppError(
            f"Unknown timezone in config: {e}. Fix it with 'worklog config set ui.timezone'",
            ERROR_INVALID_ARGS,
        ) from e


def resolve_output(output: str | None) -> str:
    """Pick the output format: explicit option first, then the config default."""
    fmt = output or get_config_service().config.output.format
    if fmt not in OUTPUT_FORMATS:
        raise AppError(
            f"Unknown output format '{fmt}' (choose from {', '.join(OUTPUT_FORMATS)})",
            ERROR_INVALID_ARGS,
        )
    return fmt


def require_task(store: TaskStore, ref: str) -> Task:
    """Resolve an ID or unique suffix to a task, or fail with ERROR_NOT_FOUND."""
    try:
        task_id = resolve_task_id(store, ref)
    except ValueError as e:
        raise AppError(str(e), ERROR_NOT_FOUND) from e
    return store.get_task_by_id(task_id)


def resolve_item_id(item_ids: list[str], ref: str, kind: str) -> str:
    """Resolve an ID or unique suffix among a task's logs or outputs."""
    if ref in item_ids:
        return ref
    matches = [i for i in item_ids if i.endswith(ref)]
    if not matches:
        raise AppError(f"No {kind} found with ID or suffix '{ref}'", ERROR_NOT_FOUND)
    if len(matches) > 1:
        raise AppError(
            f"Multiple {kind}s match suffix '{ref}'; use a longer suffix",
            ERROR_INVALID_ARGS,
        )
    return matches[0]


def parse_when(text: str, tz: tzinfo) -> int:
    """Parse a user supplied date or date-time into epoch ms."""
    try:
        return parse_datetime(text, tz)
    except ValueError as e:
        raise AppError(
            f"Invalid date/time '{text}' (expected YYYY-MM-DD or 'YYYY-MM-DD HH:MM')",
            ERROR_INVALID_ARGS,
        ) from e


def parse_day(text: str | None, default: date) -> date:
    if not text:
        return default
    try:
        return parse_date(text)
    except ValueError as e:
        raise AppError(
            f"Invalid date '{text}' (expected YYYY-MM-DD)", ERROR_INVALID_ARGS
        ) from e


def task_to_dict(task: Task) -> dict:
    """Wire representation of a task for json/yaml output."""
    return task.model_dump(mode="json", by_alias=True)


def category_pair(task: Task, other_label: str) -> str:
    return f"{task.main_category or other_label} / {task.sub_category or other_label}"
