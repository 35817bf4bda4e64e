"""Site domain models — CMS payloads and resolved content models."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cmsbridge.config import ModelConfig
from cmsbridge.shared.errors import InvalidPayloadError


class PayloadMetadata(BaseModel):
    """Webhook metadata; only ``model`` is required."""

    model_config = ConfigDict(extra="allow")

    model: str = Field(min_length=1)


class EntryData(BaseModel):
    """The CMS entry itself.

    ``Title`` and ``id`` are required; every other field is kept verbatim
    and handed to the archetype.
    """

    model_config = ConfigDict(extra="allow")

    title: str = Field(alias="Title")
    id: int = Field(strict=True)

    @field_validator("title", mode="before")
    @classmethod
    def _stringify_title(cls, value: Any) -> str:
        if value is None:
            raise ValueError("Title must not be null")
        return value if isinstance(value, str) else str(value)


class Payload(BaseModel):
    """A validated content-change payload."""

    metadata: PayloadMetadata
    entry: EntryData

    @classmethod
    def parse(cls, data: Any) -> Payload:
        """Validate raw webhook data, raising InvalidPayloadError on failure."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            fields = sorted(
                {".".join(str(p) for p in err["loc"]) or "payload" for err in exc.errors()}
            )
            raise InvalidPayloadError(
                f"invalid payload: {', '.join(fields)}",
                identifier=", ".join(fields),
            ) from exc

    @property
    def model_name(self) -> str:
        return self.metadata.model

    @property
    def title(self) -> str:
        return self.entry.title

    @property
    def entry_id(self) -> str:
        """Registry key: ``<model>-<id>``."""
        return f"{self.metadata.model}-{self.entry.id}"

    def entry_fields(self) -> dict[str, Any]:
        """The entry as a plain dict, keyed the way the CMS sent it."""
        return self.entry.model_dump(by_alias=True)


class ResolvedModel(BaseModel):
    """A content model with its paths resolved against the site root."""

    name: str
    model: ModelConfig
    is_single: bool
    archetype_path: Path
    output_dir: Path
