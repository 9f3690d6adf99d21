"""Import and export of task data.

Two file formats are supported:

* a full backup, the same document the store persists
  (``{tasks, mainCategories, subCategories}``);
* a category file holding only the two vocabularies
  (``{mainCategories, subCategories}``).

Imports are validated completely before the store is touched, so a rejected
file leaves the current state unchanged.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from worklog_cli.models import CategoryData, StoreSnapshot
from worklog_cli.services.task_store import TaskStore
from worklog_cli.utils.logger import get_logger

CATEGORIES_FILE_NAME = "categories.json"


class DataImportError(ValueError):
    """Raised when an import file is unreadable or has the wrong shape."""


def backup_file_name(day: date) -> str:
    """Default file name for a full backup taken on *day*."""
    return f"task_tracker_backup_{day.isoformat()}.json"


def read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise DataImportError(f"File not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DataImportError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DataImportError(f"Invalid JSON in {path}: {e}") from e


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def parse_full_backup(payload: Any) -> StoreSnapshot:
    """Validate a full backup document.

    ``tasks`` and ``mainCategories`` must be lists; a missing
    ``subCategories`` falls back to the default vocabulary.
    """
    if not isinstance(payload, dict):
        raise DataImportError("Invalid backup file: expected a JSON object")
    if not isinstance(payload.get("tasks"), list) or not isinstance(
        payload.get("mainCategories"), list
    ):
        raise DataImportError(
            "Invalid backup file: 'tasks' and 'mainCategories' must be arrays"
        )
    try:
        return StoreSnapshot.model_validate(payload)
    except ValidationError as e:
        raise DataImportError(f"Invalid backup file: {e}") from e


def parse_categories(payload: Any) -> CategoryData:
    """Validate a category file; both vocabularies must be present."""
    if (
        not isinstance(payload, dict)
        or not payload.get("mainCategories")
        or not payload.get("subCategories")
    ):
        raise DataImportError(
            "Invalid category file: 'mainCategories' and 'subCategories' are required"
        )
    try:
        return CategoryData.model_validate(payload)
    except ValidationError as e:
        raise DataImportError(f"Invalid category file: {e}") from e


class DataService:
    """Moves store contents to and from JSON files."""

    def __init__(self, store: TaskStore):
        self.store = store
        self.logger = get_logger(__name__)

    def export_full(self) -> dict:
        return self.store.snapshot().to_json_dict()

    def export_categories(self) -> dict:
        data = CategoryData(
            main_categories=self.store.main_categories,
            sub_categories=self.store.sub_categories,
        )
        return data.model_dump(mode="json", by_alias=True)

    def import_full(self, payload: Any) -> StoreSnapshot:
        """Replace the whole store with a validated backup document."""
        snapshot = parse_full_backup(payload)
        self.store.import_full_data(snapshot)
        self.logger.info("imported full backup with %d tasks", len(snapshot.tasks))
        return snapshot

    def import_categories(self, payload: Any) -> CategoryData:
        """Replace both vocabularies with a validated category document."""
        data = parse_categories(payload)
        self.store.import_categories(data)
        self.logger.info(
            "imported categories (%d main, %d sub)",
            len(data.main_categories),
            len(data.sub_categories),
        )
        return data

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def export_full_file(self, path: Path) -> Path:
        return write_json(path, self.export_full())

    def export_categories_file(self, path: Path) -> Path:
        return write_json(path, self.export_categories())

    def import_full_file(self, path: Path) -> StoreSnapshot:
        return self.import_full(read_json(path))

    def import_categories_file(self, path: Path) -> CategoryData:
        return self.import_categories(read_json(path))
