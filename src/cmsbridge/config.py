"""Unified configuration loaded from .cmsbridge.toml, env vars, and CLI flags.

Later sources win: defaults, then the TOML file, then env vars, then CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from cmsbridge.shared.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".cmsbridge.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
    Path.home() / ".config" / "cmsbridge",
]

DEFAULT_PUBLIC_DIR = "public"


class ModelConfig(BaseModel):
    """A content model: the archetype it renders from and where files go."""

    archetype_path: str
    output_dir: str


class RegistrySettings(BaseModel):
    """[site.registry] section."""

    type: str = "json"
    path: str = ".cmsbridge/registry.json"


class SiteConfig(BaseModel):
    """[site] section — the Hugo site entries are synced into."""

    root_dir: str = "."
    build: str = ""
    build_command: str = "hugo"
    collection_types: dict[str, ModelConfig] = Field(default_factory=dict)
    single_types: dict[str, ModelConfig] = Field(default_factory=dict)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)

    @property
    def root(self) -> Path:
        """The site root as an absolute path."""
        return Path(self.root_dir).expanduser().resolve()

    def resolve_path(self, path: str | Path) -> Path:
        """Return ``path`` as is when absolute, otherwise under the site root."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.root / candidate

    @property
    def public_path(self) -> Path:
        """Directory the site generator writes its build output to.

        ``build`` wins when set (absolute, or relative to the root);
        otherwise ``<root>/public``.
        """
        if self.build:
            return self.resolve_path(self.build)
        return self.root / DEFAULT_PUBLIC_DIR


class DeploymentSettings(BaseModel):
    """[deployment] section — S3 bucket and static credentials."""

    bucket_name: str = ""
    region: str = ""
    access_key: str = ""
    secret_key: str = ""
    s3_prefix: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.bucket_name and self.region and self.access_key and self.secret_key)


class BridgeConfig(BaseModel):
    """Top-level configuration model."""

    site: SiteConfig = Field(default_factory=SiteConfig)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)


# ── Loading ──────────────────────────────────────────────────────────

# Env var / CLI flag name -> (section, field) in BridgeConfig.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "CMSBRIDGE_ROOT_DIR": ("site", "root_dir"),
    "CMSBRIDGE_BUILD_DIR": ("site", "build"),
    "CMSBRIDGE_S3_BUCKET": ("deployment", "bucket_name"),
    "CMSBRIDGE_S3_REGION": ("deployment", "region"),
    "CMSBRIDGE_S3_PREFIX": ("deployment", "s3_prefix"),
    "CMSBRIDGE_AWS_ACCESS_KEY": ("deployment", "access_key"),
    "CMSBRIDGE_AWS_SECRET_KEY": ("deployment", "secret_key"),
}

CLI_OVERRIDES: dict[str, tuple[str, str]] = {
    "root_dir": ("site", "root_dir"),
    "build_dir": ("site", "build"),
    "bucket": ("deployment", "bucket_name"),
    "prefix": ("deployment", "s3_prefix"),
}


def load_config(path: str | Path | None = None) -> BridgeConfig:
    """Load configuration from a TOML file, then overlay env vars.

    Without an explicit ``path`` the first ``.cmsbridge.toml`` found in
    CONFIG_SEARCH_PATHS is used, falling back to
    ``~/.config/cmsbridge/config.toml``. A missing or unparsable file
    yields the defaults.

    Raises:
        ConfigError: The file parses but does not match the schema, or an
            env var override is invalid.
    """
    source = _find_config_file(path)
    data = _read_toml(source) if source is not None else {}
    config = _validate(data, source=str(source)) if data else BridgeConfig()

    overrides = {
        target: os.environ[name] for name, target in ENV_OVERRIDES.items() if name in os.environ
    }
    return _overlay(config, overrides, source="environment")


def merge_cli_overrides(config: BridgeConfig, **cli_kwargs: object) -> BridgeConfig:
    """Overlay CLI flags onto the config.

    Flags left as None and names outside CLI_OVERRIDES are ignored.
    """
    overrides = {
        CLI_OVERRIDES[key]: str(value)
        for key, value in cli_kwargs.items()
        if value is not None and key in CLI_OVERRIDES
    }
    return _overlay(config, overrides, source="command line")


def _find_config_file(path: str | Path | None) -> Path | None:
    if path is not None:
        explicit = Path(path)
        if explicit.exists():
            return explicit
        logger.warning("Config file not found: %s", explicit)
        return None

    candidates = [d / CONFIG_FILENAME for d in CONFIG_SEARCH_PATHS]
    candidates.append(Path.home() / ".config" / "cmsbridge" / "config.toml")
    for candidate in candidates:
        if candidate.exists():
            logger.info("Using config %s", candidate)
            return candidate
    return None


def _read_toml(path: Path) -> dict[str, object]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}


def _overlay(
    config: BridgeConfig, overrides: dict[tuple[str, str], str], *, source: str
) -> BridgeConfig:
    if not overrides:
        return config
    data = config.model_dump()
    for (section, field), value in overrides.items():
        data[section][field] = value
    return _validate(data, source=source)


def _validate(data: dict[str, object], *, source: str) -> BridgeConfig:
    try:
        return BridgeConfig.model_validate(data)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise ConfigError(
            f"invalid configuration from {source}: {', '.join(fields)}", identifier=source
        ) from exc
