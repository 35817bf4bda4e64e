"""Shared fixtures: a minimal Hugo-like site on disk."""

from pathlib import Path

import pytest

from cmsbridge.config import ModelConfig, RegistrySettings, SiteConfig

POST_ARCHETYPE = """---
title: "{{ Entry.Title }}"
id: {{ Entry.id }}
---
{{ Entry.body }}
"""

ABOUT_ARCHETYPE = "<h1>{{ Entry.Title }}</h1>\n"


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    archetypes = root / "archetypes"
    archetypes.mkdir(parents=True)
    (archetypes / "post.html").write_text(POST_ARCHETYPE, encoding="utf-8")
    (archetypes / "about.html").write_text(ABOUT_ARCHETYPE, encoding="utf-8")
    return root


@pytest.fixture
def site(site_root: Path) -> SiteConfig:
    return SiteConfig(
        root_dir=str(site_root),
        collection_types={
            "post": ModelConfig(archetype_path="archetypes/post.html", output_dir="content/posts"),
            "broken": ModelConfig(archetype_path="archetypes/missing.html", output_dir="content/x"),
        },
        single_types={
            "about": ModelConfig(archetype_path="archetypes/about.html", output_dir="content"),
        },
        registry=RegistrySettings(type="json", path="data/registry.json"),
    )

