"""Configuration service for managing worklog CLI configuration.

This module provides the ConfigService class, which is the single source of truth
for all configuration management in worklog CLI. It handles:

- Loading and saving config.json
- Dotted-key access (``reports.week_starts_on``) for the config command
- Resolving where the task snapshot lives and which timezone reports use
"""

from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel

from worklog_cli.adapters.json_file import STORAGE_NAME, JsonFileRepository
from worklog_cli.models.config_models import AppConfig
from worklog_cli.services.task_store import TaskStore
from worklog_cli.utils.time_windows import resolve_timezone

_APP_NAME = "worklog_cli"


def _resolve_key(config: BaseModel, key: str) -> Any:
    """Walk a dot-separated key through nested config models.

    Raises:
        KeyError: If any part of the key does not name a config field
    """
    value: Any = config
    for part in key.split("."):
        if not isinstance(value, BaseModel) or part not in type(value).model_fields:
            raise KeyError(key)
        value = getattr(value, part)
    return value


class ConfigService:
    """Service for managing application configuration.

    The configuration is loaded lazily on first access and every change is
    written straight back to ``config.json``.
    """

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(_APP_NAME))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run: write the defaults so users can find and edit them
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key.

        Raises:
            KeyError: If the key does not exist
        """
        return _resolve_key(self.config, key)

    def set(self, key: str, value: Any) -> Any:
        """Set a configuration value by dot-separated key.

        The whole document is re-validated, so a value of the wrong type is
        rejected with a pydantic ``ValidationError`` and nothing is saved.

        Returns:
            The stored (validated) value
        """
        _resolve_key(self.config, key)
        parts = key.split(".")

        config_dict = self.config.model_dump()
        current = config_dict
        for part in parts[:-1]:
            current = current[part]
        current[parts[-1]] = value

        self._config = AppConfig.model_validate(config_dict)
        self.save_config()
        return self.get(key)

    def reset(self, key: str | None = None) -> None:
        """Reset one key, or the whole configuration, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return

        default_value = _resolve_key(AppConfig(), key)
        if isinstance(default_value, BaseModel):
            default_value = default_value.model_dump()
        self.set(key, default_value)

    @property
    def data_file(self) -> Path:
        """Location of the task snapshot."""
        configured = self.config.storage.data_file
        if configured:
            return Path(configured).expanduser()
        return self.data_dir / STORAGE_NAME

    @property
    def timezone(self) -> tzinfo:
        """Timezone used to resolve days and weeks in reports."""
        return resolve_timezone(self.config.ui.timezone)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


def get_task_store() -> TaskStore:
    """Open the task store at the configured location."""
    config_service = get_config_service()
    return TaskStore(JsonFileRepository(config_service.data_file))
