"""Base class for entry registries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class EntryRegistry(ABC):
    """Durable map from entry id to the file the entry was rendered to.

    Mutations are only guaranteed to survive a crash once ``flush``
    returns.
    """

    @abstractmethod
    def open_storage(self) -> None:
        """Open existing storage. Raises RegistryError if there is none."""

    @abstractmethod
    def create_storage(self) -> None:
        """Initialise fresh, empty storage."""

    @abstractmethod
    def create_entry(self, entry_id: str, path: Path) -> None:
        """Register a new entry. Raises ConflictError if the id is taken."""

    @abstractmethod
    def read_entry(self, entry_id: str) -> Path:
        """Return the registered path. Raises EntryNotFoundError."""

    @abstractmethod
    def update_entry(self, entry_id: str, path: Path) -> None:
        """Point an existing entry at a new path. Raises EntryNotFoundError."""

    @abstractmethod
    def delete_entry(self, entry_id: str) -> None:
        """Forget an entry. Raises EntryNotFoundError."""

    @abstractmethod
    def entries(self) -> dict[str, Path]:
        """Snapshot of every registered entry."""

    @abstractmethod
    def flush(self) -> None:
        """Persist all mutations made so far."""
