"""In-memory adapter for snapshot persistence."""

from __future__ import annotations

from worklog_cli.models import StoreSnapshot
from worklog_cli.repositories import SnapshotRepository


class InMemoryRepository(SnapshotRepository):
    """Keeps the last saved snapshot in memory.

    ``saves`` counts writes, which lets callers check that every mutation
    persisted exactly once.
    """

    def __init__(self, snapshot: StoreSnapshot | None = None):
        self._snapshot = snapshot.model_copy(deep=True) if snapshot else None
        self.saves = 0

    def load(self) -> StoreSnapshot | None:
        if self._snapshot is None:
            return None
        return self._snapshot.model_copy(deep=True)

    def save(self, snapshot: StoreSnapshot) -> None:
        self._snapshot = snapshot.model_copy(deep=True)
        self.saves += 1
