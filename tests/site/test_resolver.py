"""Tests for ModelResolver."""

from pathlib import Path

import pytest

from cmsbridge.config import ModelConfig, SiteConfig
from cmsbridge.shared.errors import ConfigError
from cmsbridge.site.resolver import ModelResolver


class TestResolve:
    def test_collection_type(self, site: SiteConfig, site_root: Path):
        resolved = ModelResolver(site).resolve("post")
        assert resolved.is_single is False
        assert resolved.archetype_path == site_root / "archetypes" / "post.html"
        assert resolved.output_dir == site_root / "content" / "posts"

    def test_single_type(self, site: SiteConfig):
        resolved = ModelResolver(site).resolve("about")
        assert resolved.is_single is True
        assert resolved.model.output_dir == "content"

    def test_collection_wins_over_single(self, site_root: Path):
        site = SiteConfig(
            root_dir=str(site_root),
            collection_types={"page": ModelConfig(archetype_path="a.html", output_dir="c")},
            single_types={"page": ModelConfig(archetype_path="b.html", output_dir="s")},
        )
        resolved = ModelResolver(site).resolve("page")
        assert resolved.is_single is False
        assert resolved.model.archetype_path == "a.html"

    def test_absolute_paths_kept(self, tmp_path: Path):
        site = SiteConfig(
            root_dir=str(tmp_path / "root"),
            collection_types={
                "post": ModelConfig(
                    archetype_path=str(tmp_path / "abs.html"), output_dir=str(tmp_path / "out")
                )
            },
        )
        resolved = ModelResolver(site).resolve("post")
        assert resolved.archetype_path == tmp_path / "abs.html"
        assert resolved.output_dir == tmp_path / "out"

    def test_unknown_model_is_explicit_error(self, site: SiteConfig):
        with pytest.raises(ConfigError) as exc_info:
            ModelResolver(site).resolve("nope")
        assert exc_info.value.identifier == "nope"


class TestResolveWithArchetype:
    def test_existing_archetype(self, site: SiteConfig):
        assert ModelResolver(site).resolve_with_archetype("post").name == "post"

    def test_missing_archetype(self, site: SiteConfig):
        with pytest.raises(ConfigError, match="archetype"):
            ModelResolver(site).resolve_with_archetype("broken")
