"""Application configuration models.

The configuration is a single JSON document stored in the user's config
directory. Every section has sensible defaults so a missing file simply means
"use the defaults".
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class StorageConfig(BaseModel):
    """Where the task snapshot is persisted."""

    data_file: str | None = Field(
        default=None, description="Path to task-storage.json (None = user data dir)"
    )


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["table", "json", "yaml"] = Field(default="table")
    color: bool = Field(default=True)


class UIConfig(BaseModel):
    """UI configuration."""

    timezone: str = Field(default="UTC")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("timezone cannot be empty")
        return v.strip()


class ReportConfig(BaseModel):
    """Settings shared by the report commands."""

    week_starts_on: int = Field(default=0, ge=0, le=6, description="0 = Monday")
    weekly_window_months: int = Field(default=1, ge=0)
    levels: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])
    exclude_keywords: list[str] = Field(
        default_factory=lambda: [
            "Meeting",
            "Discussion",
            "Admin",
            "Sync",
        ]
    )
    wbs_root_title: str = Field(default="Project Tasks")
    other_label: str = Field(default="Other")


class AppConfig(BaseModel):
    """Main worklog configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    reports: ReportConfig = Field(default_factory=ReportConfig)
