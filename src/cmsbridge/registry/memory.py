"""In-memory entry registry for dry runs and tests."""

from __future__ import annotations

from pathlib import Path

from cmsbridge.registry.base import EntryRegistry
from cmsbridge.shared.errors import ConflictError, EntryNotFoundError, RegistryError


class InMemoryRegistry(EntryRegistry):
    """Registry that lives only as long as the process.

    Behaves like a fresh install: ``open_storage`` fails until
    ``create_storage`` has been called once.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Path] | None = None
        self.flush_count = 0

    def _require_open(self) -> dict[str, Path]:
        if self._entries is None:
            raise RegistryError("in-memory registry is not open", identifier="memory")
        return self._entries

    def open_storage(self) -> None:
        self._require_open()

    def create_storage(self) -> None:
        self._entries = {}

    def create_entry(self, entry_id: str, path: Path) -> None:
        entries = self._require_open()
        if entry_id in entries:
            raise ConflictError(f"entry {entry_id} is already registered", identifier=entry_id)
        entries[entry_id] = Path(path)

    def read_entry(self, entry_id: str) -> Path:
        entries = self._require_open()
        if entry_id not in entries:
            raise EntryNotFoundError(f"entry {entry_id} is not registered", identifier=entry_id)
        return entries[entry_id]

    def update_entry(self, entry_id: str, path: Path) -> None:
        self.read_entry(entry_id)
        self._require_open()[entry_id] = Path(path)

    def delete_entry(self, entry_id: str) -> None:
        self.read_entry(entry_id)
        del self._require_open()[entry_id]

    def entries(self) -> dict[str, Path]:
        return dict(self._require_open())

    def flush(self) -> None:
        self._require_open()
        self.flush_count += 1
