"""Storage adapters implementing the repository ports."""

from .json_file import JsonFileRepository
from .memory import InMemoryRepository

__all__ = ["JsonFileRepository", "InMemoryRepository"]
