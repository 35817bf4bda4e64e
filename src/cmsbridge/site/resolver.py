"""Map content-model names to their archetype and output directory."""

from __future__ import annotations

from cmsbridge.config import SiteConfig
from cmsbridge.shared.errors import ConfigError
from cmsbridge.site.models import ResolvedModel


class ModelResolver:
    """Looks up models in a site's collection types, then its single types."""

    def __init__(self, site: SiteConfig) -> None:
        self.site = site

    def resolve(self, name: str) -> ResolvedModel:
        """Resolve a model by name.

        Raises:
            ConfigError: If neither collection nor single types define it.
        """
        if name in self.site.collection_types:
            model, is_single = self.site.collection_types[name], False
        elif name in self.site.single_types:
            model, is_single = self.site.single_types[name], True
        else:
            raise ConfigError(f"model {name!r} is not configured", identifier=name)

        return ResolvedModel(
            name=name,
            model=model,
            is_single=is_single,
            archetype_path=self.site.resolve_path(model.archetype_path),
            output_dir=self.site.resolve_path(model.output_dir),
        )

    def resolve_with_archetype(self, name: str) -> ResolvedModel:
        """Resolve a model and check that its archetype file exists."""
        resolved = self.resolve(name)
        if not resolved.archetype_path.is_file():
            raise ConfigError(
                f"archetype for model {name!r} does not exist: {resolved.archetype_path}",
                identifier=name,
            )
        return resolved
