"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fedcat.core import config
from fedcat.core.catalog import FederatedCatalog
from fedcat.core.registry import JsonFileRegistry


@dataclass
class CatalogAppContext:
    """Application context holding the registry and the federated catalog."""

    registry_path: Path
    registry: JsonFileRegistry
    catalog: FederatedCatalog


def build_catalog_context(registry_path: Path | None) -> CatalogAppContext:
    """Build the application context from an explicit or configured registry path.

    Args:
        registry_path: Optional registry file; falls back to configuration.

    Returns:
        CatalogAppContext: Context with a JSON registry and a catalog over it.
    """
    path = registry_path or config.registry_path()
    registry = JsonFileRegistry(path)
    return CatalogAppContext(
        registry_path=path,
        registry=registry,
        catalog=FederatedCatalog(registry),
    )
