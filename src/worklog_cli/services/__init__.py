"""Service layer: the task store and the services built around it."""

from .data_service import DataImportError, DataService
from .report_service import ReportService
from .task_store import TaskStore

__all__ = ["DataImportError", "DataService", "ReportService", "TaskStore"]
