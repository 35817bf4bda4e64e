"""Entry synchronization — CMS payloads to rendered Hugo content files.

The registry is the single source of truth for where an entry lives on
disk.  Filenames derive only from the entry's current title, so an update
that changes the title renames the file.

Partial failures are not rolled back:

- create writes the file before registering it; a registry failure
  leaves the file on disk and is raised as RegistryError with
  ``output_path`` set.
- update removes the old file before writing the new one.

Nothing here locks; callers must serialize work on the same entry.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from cmsbridge.config import SiteConfig
from cmsbridge.registry import DEFAULT_REGISTRY_BACKENDS, EntryRegistry, RegistryFactory
from cmsbridge.shared.errors import (
    BridgeError,
    ConfigError,
    ConflictError,
    EntryNotFoundError,
    InternalError,
    RegistryError,
)
from cmsbridge.shared.slugify import slugify
from cmsbridge.site.builder import build_site
from cmsbridge.site.models import Payload
from cmsbridge.site.renderer import TemplateRenderer
from cmsbridge.site.resolver import ModelResolver

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".html"


class SiteService:
    """Creates, updates and removes content files for CMS entries."""

    def __init__(
        self,
        site: SiteConfig,
        registry_backends: Mapping[str, RegistryFactory] = DEFAULT_REGISTRY_BACKENDS,
        *,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        backend = site.registry.type
        if backend not in registry_backends:
            raise ConfigError(
                f"requested registry type {backend!r} does not exist", identifier=backend
            )

        self.site = site
        self.resolver = ModelResolver(site)
        self.renderer = renderer or TemplateRenderer()
        self.registry: EntryRegistry = registry_backends[backend](site)

        try:
            self.registry.open_storage()
        except RegistryError as exc:
            logger.info("Registry storage unavailable (%s), creating it", exc)
            self.registry.create_storage()

    def entry_id(self, payload: Payload) -> str:
        return payload.entry_id

    def output_path_for(self, output_dir: Path, title: str) -> Path:
        """Where an entry with ``title`` lives inside ``output_dir``."""
        return output_dir / f"{slugify(title)}{OUTPUT_SUFFIX}"

    # ── Lifecycle operations ─────────────────────────────────────

    def create_entry(self, payload: Payload) -> Path:
        """Render a new entry and register it.

        Raises:
            ConfigError: Unknown model or missing archetype.
            ConflictError: The entry is already registered or the output
                file already exists.
            RegistryError: Registering failed after the file was written.
        """
        model = self.resolver.resolve_with_archetype(payload.model_name)

        entry_id = payload.entry_id
        try:
            existing = self.registry.read_entry(entry_id)
        except EntryNotFoundError:
            pass
        else:
            raise ConflictError(
                f"entry {entry_id} is already registered at {existing}", identifier=entry_id
            )

        _ensure_dir(model.output_dir)

        output_path = self.output_path_for(model.output_dir, payload.title)
        if output_path.exists():
            raise ConflictError(
                f"output file {output_path.name} already exists", identifier=str(output_path)
            )

        content = self.renderer.render(model.archetype_path, payload.entry_fields())
        try:
            with open(output_path, "x", encoding="utf-8") as fh:
                fh.write(content)
        except FileExistsError as exc:
            raise ConflictError(
                f"output file {output_path.name} already exists", identifier=str(output_path)
            ) from exc
        except OSError as exc:
            raise InternalError(
                f"cannot write {output_path}: {exc}", identifier=str(output_path)
            ) from exc

        self._record(entry_id, output_path, created=True)

        logger.info("Created %s at %s", entry_id, output_path)
        return output_path

    def update_entry(self, payload: Payload) -> Path:
        """Re-render a registered entry, renaming its file if the title changed.

        Raises:
            ConfigError: Unknown model or missing archetype.
            EntryNotFoundError: The entry was never registered.
            ConflictError: The new name belongs to a different existing file.
            RegistryError: Updating the registry failed after the write.
        """
        model = self.resolver.resolve_with_archetype(payload.model_name)

        entry_id = payload.entry_id
        old_path = self.registry.read_entry(entry_id)
        output_dir = old_path.parent
        _ensure_dir(output_dir)

        output_path = self.output_path_for(output_dir, payload.title)
        if output_path.exists() and output_path.name != old_path.name:
            raise ConflictError(
                f"output file {output_path.name} already exists", identifier=str(output_path)
            )

        content = self.renderer.render(model.archetype_path, payload.entry_fields())

        if old_path.exists():
            try:
                old_path.unlink()
            except OSError as exc:
                logger.warning("Could not remove old file %s: %s", old_path, exc)

        try:
            output_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise InternalError(
                f"cannot write {output_path}: {exc}", identifier=str(output_path)
            ) from exc

        self._record(entry_id, output_path, created=False)

        if output_path != old_path:
            logger.info("Moved %s from %s to %s", entry_id, old_path, output_path)
        else:
            logger.info("Updated %s at %s", entry_id, output_path)
        return output_path

    def remove_entry(self, payload: Payload) -> Path:
        """Delete an entry's file and forget it.

        A file that is already gone is not an error.

        Returns:
            The path the entry was registered at.

        Raises:
            EntryNotFoundError: The entry was never registered.
        """
        entry_id = payload.entry_id
        path = self.registry.read_entry(entry_id)

        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise InternalError(f"cannot remove {path}: {exc}", identifier=str(path)) from exc

        self.registry.delete_entry(entry_id)
        self.registry.flush()

        logger.info("Removed %s from %s", entry_id, path)
        return path

    def build_site(self, use_cache: bool = True) -> str:
        """Run the site generator over the site root."""
        return build_site(
            self.site.root, use_cache=use_cache, command=self.site.build_command
        )

    # ── Private helpers ──────────────────────────────────────────

    def _record(self, entry_id: str, output_path: Path, *, created: bool) -> None:
        """Write ``entry_id → output_path`` to the registry and flush."""
        try:
            if created:
                self.registry.create_entry(entry_id, output_path)
            else:
                self.registry.update_entry(entry_id, output_path)
            self.registry.flush()
        except BridgeError as exc:
            raise RegistryError(
                f"{output_path} was written but registering {entry_id} failed: {exc}",
                identifier=entry_id,
                output_path=output_path,
            ) from exc


def _ensure_dir(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise InternalError(
            f"cannot create output directory {directory}: {exc}", identifier=str(directory)
        ) from exc
