"""Error hierarchy for cmsbridge.

Every error carries the identifier it is about (model name, file path,
bucket/key) so callers can report it without parsing the message.
Nothing in this package retries; a failure goes straight back to the
caller, and partially applied work (a rendered file without a registry
entry, a removed old file) is left as is.
"""

from __future__ import annotations

from pathlib import Path


class BridgeError(Exception):
    """Base error for all cmsbridge failures."""

    kind: str = "internal"

    def __init__(self, message: str, *, identifier: str | None = None) -> None:
        super().__init__(message)
        self.identifier = identifier


class ConfigError(BridgeError):
    """Unknown model, missing archetype, or unknown registry backend."""

    kind = "config"


class InvalidPayloadError(BridgeError):
    """A CMS payload failed validation at the boundary."""

    kind = "invalid"


class NotFoundError(BridgeError):
    """Something that should exist (registry entry, template) does not."""

    kind = "not_found"


class EntryNotFoundError(NotFoundError):
    """An entry id is not present in the registry."""


class ConflictError(BridgeError):
    """An output file name or registry id is already taken."""

    kind = "conflict"


class InternalError(BridgeError):
    """Render, filesystem, registry, upload, or build failure."""

    kind = "internal"


class RenderError(InternalError):
    """An archetype could not be rendered."""


class RegistryError(InternalError):
    """The registry storage failed.

    When raised after an entry file was already written, ``output_path``
    points at that file so the caller can reconcile it.
    """

    def __init__(
        self,
        message: str,
        *,
        identifier: str | None = None,
        output_path: Path | None = None,
    ) -> None:
        super().__init__(message, identifier=identifier)
        self.output_path = output_path


class BuildError(InternalError):
    """The static-site generator exited with an error."""


class WalkError(InternalError):
    """Walking the build output directory failed."""


class UploadError(InternalError):
    """Uploading an artifact to object storage failed."""

    def __init__(self, message: str, *, bucket: str, key: str) -> None:
        super().__init__(message, identifier=f"s3://{bucket}/{key}")
        self.bucket = bucket
        self.key = key


class DeploymentError(InternalError):
    """A deployment could not continue for a reason other than an upload."""
