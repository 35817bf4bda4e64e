"""Entry registries and the backend table used to construct them."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType

from cmsbridge.config import SiteConfig
from cmsbridge.registry.base import EntryRegistry
from cmsbridge.registry.json_store import JsonRegistry
from cmsbridge.registry.memory import InMemoryRegistry

RegistryFactory = Callable[[SiteConfig], EntryRegistry]


def _json_registry(site: SiteConfig) -> EntryRegistry:
    return JsonRegistry(site.resolve_path(site.registry.path))


def _memory_registry(site: SiteConfig) -> EntryRegistry:
    return InMemoryRegistry()


DEFAULT_REGISTRY_BACKENDS: Mapping[str, RegistryFactory] = MappingProxyType(
    {
        "json": _json_registry,
        "memory": _memory_registry,
    }
)

__all__ = [
    "DEFAULT_REGISTRY_BACKENDS",
    "EntryRegistry",
    "InMemoryRegistry",
    "JsonRegistry",
    "RegistryFactory",
]
