"""Repository interfaces for the Worklog CLI.

Implementations (Adapters) are in:
- worklog_cli.adapters.json_file (local JSON document)
- worklog_cli.adapters.memory (in-process, used by tests and dry runs)
"""

from .repository import SnapshotRepository

__all__ = ["SnapshotRepository"]
