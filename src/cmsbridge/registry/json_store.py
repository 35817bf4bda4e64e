"""JSON-backed entry registry.

Keeps every entry id → path mapping in a single JSON file.  Mutations
are held in memory and written atomically on ``flush``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from cmsbridge.registry.base import EntryRegistry
from cmsbridge.shared.errors import ConflictError, EntryNotFoundError, RegistryError

logger = logging.getLogger(__name__)


class _RegistryData(BaseModel):
    """Internal wrapper for JSON serialization."""

    entries: dict[str, str] = Field(default_factory=dict)


class JsonRegistry(EntryRegistry):
    """Registry stored as one JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._data: _RegistryData | None = None

    @property
    def path(self) -> Path:
        return self._path

    # ── Private helpers ──────────────────────────────────────────

    def _require_open(self) -> _RegistryData:
        if self._data is None:
            raise RegistryError(
                f"registry storage at {self._path} is not open", identifier=str(self._path)
            )
        return self._data

    def _require(self, entry_id: str) -> str:
        data = self._require_open()
        if entry_id not in data.entries:
            raise EntryNotFoundError(f"entry {entry_id} is not registered", identifier=entry_id)
        return data.entries[entry_id]

    # ── Storage lifecycle ────────────────────────────────────────

    def open_storage(self) -> None:
        if not self._path.is_file():
            raise RegistryError(
                f"registry storage {self._path} does not exist", identifier=str(self._path)
            )
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            self._data = _RegistryData.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise RegistryError(
                f"cannot read registry storage {self._path}: {exc}", identifier=str(self._path)
            ) from exc
        logger.debug("Opened registry %s (%d entries)", self._path, len(self._data.entries))

    def create_storage(self) -> None:
        if self._path.exists():
            raise RegistryError(
                f"refusing to overwrite existing registry storage {self._path}",
                identifier=str(self._path),
            )
        self._data = _RegistryData()
        self.flush()
        logger.info("Created registry %s", self._path)

    # ── Write operations ─────────────────────────────────────────

    def create_entry(self, entry_id: str, path: Path) -> None:
        data = self._require_open()
        if entry_id in data.entries:
            raise ConflictError(f"entry {entry_id} is already registered", identifier=entry_id)
        data.entries[entry_id] = str(path)

    def update_entry(self, entry_id: str, path: Path) -> None:
        self._require(entry_id)
        self._require_open().entries[entry_id] = str(path)

    def delete_entry(self, entry_id: str) -> None:
        self._require(entry_id)
        del self._require_open().entries[entry_id]

    def flush(self) -> None:
        data = self._require_open()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(data.model_dump_json(indent=2))
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise RegistryError(
                f"cannot write registry storage {self._path}: {exc}", identifier=str(self._path)
            ) from exc

    # ── Read operations ──────────────────────────────────────────

    def read_entry(self, entry_id: str) -> Path:
        return Path(self._require(entry_id))

    def entries(self) -> dict[str, Path]:
        return {k: Path(v) for k, v in self._require_open().entries.items()}
