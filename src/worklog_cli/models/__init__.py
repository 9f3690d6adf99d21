"""Worklog domain models.

This package contains the Pydantic models for tasks, time logs, work outputs
and category vocabularies, plus the application configuration models.
"""

from .config_models import AppConfig
from .core import (
    DEFAULT_MAIN_CATEGORIES,
    DEFAULT_SUB_CATEGORIES,
    MAX_DEPTH,
    OTHER_CATEGORY,
    CategoryData,
    StoreSnapshot,
    Task,
    TaskCreate,
    TaskFilters,
    TaskStatus,
    TaskUpdate,
    TimeLog,
    WorkOutput,
    WorkOutputUpdate,
)

__all__ = [
    # Task models
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    "TaskStatus",
    # Time and output models
    "TimeLog",
    "WorkOutput",
    "WorkOutputUpdate",
    # Store documents
    "CategoryData",
    "StoreSnapshot",
    # Constants
    "DEFAULT_MAIN_CATEGORIES",
    "DEFAULT_SUB_CATEGORIES",
    "MAX_DEPTH",
    "OTHER_CATEGORY",
    # Config models
    "AppConfig",
]
