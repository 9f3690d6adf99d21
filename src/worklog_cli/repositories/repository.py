"""Repository abstraction layer for Worklog CLI.

The store keeps its whole state in memory and writes a complete snapshot after
every mutation, so the persistence port is a single load/save pair rather than
per-entity CRUD.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from worklog_cli.models import StoreSnapshot


class SnapshotRepository(ABC):
    """Abstract base class for snapshot persistence.

    Implementations must make ``save`` synchronous: when it returns, the
    snapshot is durable.
    """

    @abstractmethod
    def load(self) -> StoreSnapshot | None:
        """Load the persisted snapshot.

        Returns:
            The stored snapshot, or None if nothing has been saved yet

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "SnapshotRepository.load() must be implemented by adapter"
        )

    @abstractmethod
    def save(self, snapshot: StoreSnapshot) -> None:
        """Persist the full snapshot, replacing whatever was stored.

        Args:
            snapshot: Complete store state

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "SnapshotRepository.save() must be implemented by adapter"
        )
