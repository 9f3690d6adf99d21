"""JSON file adapter for snapshot persistence."""

from __future__ import annotations

import json
import os
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError

from worklog_cli.models import StoreSnapshot
from worklog_cli.repositories import SnapshotRepository

STORAGE_NAME = "task-storage.json"


def default_data_file() -> Path:
    """Return the default location of the task snapshot."""
    return Path(user_data_dir("worklog_cli")) / STORAGE_NAME


class JsonFileRepository(SnapshotRepository):
    """Stores the whole snapshot as one JSON document on disk."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else default_data_file()

    def load(self) -> StoreSnapshot | None:
        """Load snapshot from file. Returns None if the file does not exist."""
        if not self.path.exists():
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return StoreSnapshot.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise RuntimeError(f"Failed to load task storage {self.path}: {e}") from e

    def save(self, snapshot: StoreSnapshot) -> None:
        """Write the snapshot, replacing the previous file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")

        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(snapshot.to_json_dict(), f, indent=2, ensure_ascii=False)

        os.replace(tmp_path, self.path)
        self.path.chmod(0o600)
