"""Federated catalog: the public entry point for catalog operations.

Every operation resolves the owning datasource of the addressed namespace,
strips the routing prefix and delegates to the backend catalog selected by
the datasource's kind. Namespace levels without a datasource are plain
organizational namespaces kept in the metadata registry.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from fedcat.core.adapters import catalog_for
from fedcat.core.backends import BackendCatalog
from fedcat.core.errors import (
    InvalidNamespace,
    MissingNamespace,
    NamespaceNotDefined,
    UnsupportedOperation,
)
from fedcat.core.models import DatasourceDefinition
from fedcat.core.namespace import (
    DATASOURCE_ROOT,
    ROOT_NAMESPACES,
    SYSTEM_NAMESPACE,
    Identifier,
    Namespace,
    is_reserved_root,
)
from fedcat.core.registry import MetadataRegistry
from fedcat.core.resolver import CatalogResolver, Resolution
from fedcat.core.system import SystemCatalog
from fedcat.core.tables import Column

logger = logging.getLogger(__name__)


class FederatedCatalog:
    """Route catalog operations to the backend owning each namespace."""

    name = SYSTEM_NAMESPACE

    def __init__(
        self,
        registry: MetadataRegistry,
        backend_factory: Callable[[DatasourceDefinition], BackendCatalog] = catalog_for,
    ) -> None:
        self.registry = registry
        self.backend_factory = backend_factory
        self._closed = False

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> FederatedCatalog:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _snapshot(self) -> MetadataRegistry:
        if self._closed:
            raise RuntimeError("Catalog is closed.")
        return self.registry.snapshot()

    def _resolve(
        self, namespace: Namespace, snapshot: MetadataRegistry | None = None
    ) -> Resolution | None:
        return CatalogResolver(snapshot or self._snapshot()).resolve_owner(namespace)

    def _require(self, namespace: Namespace) -> Resolution:
        resolution = self._resolve(namespace)
        if resolution is None:
            raise NamespaceNotDefined(namespace)
        return resolution

    @contextmanager
    def _backend(self, resolution: Resolution) -> Iterator[BackendCatalog]:
        backend = self.backend_factory(resolution.datasource)
        logger.debug(
            "Delegating to %s backend of %s",
            resolution.datasource.kind.value,
            resolution.datasource.full_namespace,
        )
        try:
            yield backend
        finally:
            backend.close()

    def list_tables(self, namespace: Namespace) -> list[Identifier]:
        """List tables directly under `namespace`."""
        if namespace == [SYSTEM_NAMESPACE]:
            return SystemCatalog(self._snapshot()).list_tables()
        resolution = self._require(namespace)
        with self._backend(resolution) as backend:
            local = backend.listing_namespace(namespace, resolution.residual)
            tables = backend.list_tables(local)
        return [Identifier(namespace, t.name) for t in tables]

    def load_table(self, identifier: Identifier) -> Any:
        """
        Load a table.

        The first namespace segment selects the route: `lightning` serves
        registry tables, `datasource` delegates to the owning backend.
        """
        namespace = identifier.namespace
        if not namespace:
            raise MissingNamespace()

        head = namespace[0].lower()
        if head == SYSTEM_NAMESPACE:
            return SystemCatalog(self._snapshot()).load_table(identifier)
        if head == DATASOURCE_ROOT:
            resolution = self._require(namespace)
            with self._backend(resolution) as backend:
                return backend.load_table(identifier.with_namespace(resolution.residual))
        raise InvalidNamespace(f"invalid namespace : {namespace[0]}")

    def create_table(
        self,
        identifier: Identifier,
        columns: Sequence[Column],
        partitioning: Sequence[str] = (),
        properties: Mapping[str, str] | None = None,
    ) -> Any:
        resolution = self._require(identifier.namespace)
        with self._backend(resolution) as backend:
            return backend.create_table(
                identifier.with_namespace(resolution.residual),
                columns,
                partitioning,
                dict(properties or {}),
            )

    def drop_table(self, identifier: Identifier) -> bool:
        resolution = self._require(identifier.namespace)
        with self._backend(resolution) as backend:
            return backend.drop_table(identifier.with_namespace(resolution.residual))

    def table_exists(self, identifier: Identifier) -> bool:
        resolution = self._resolve(identifier.namespace)
        if resolution is None:
            return False
        with self._backend(resolution) as backend:
            return backend.table_exists(identifier.with_namespace(resolution.residual))

    def alter_table(self, identifier: Identifier, *changes: Any) -> Any:
        raise UnsupportedOperation("alter table is not supported")

    def rename_table(self, old: Identifier, new: Identifier) -> None:
        raise UnsupportedOperation("rename table is not supported")

    def alter_namespace(self, namespace: Namespace, *changes: Any) -> None:
        raise UnsupportedOperation("alter namespace is not supported")

    def list_namespaces(self, namespace: Namespace | None = None) -> list[Namespace]:
        """
        List namespaces.

        Without an argument this returns the two reserved roots. Otherwise
        it returns the absolute child namespaces of `namespace`, from the
        owning backend or, for organizational levels, from the registry.
        """
        if not namespace:
            return [Namespace([root]) for root in ROOT_NAMESPACES]

        snapshot = self._snapshot()
        resolution = self._resolve(namespace, snapshot)
        if resolution is None:
            return [namespace.child(n) for n in snapshot.list_child_namespaces(namespace)]

        prefix = resolution.datasource.full_namespace
        with self._backend(resolution) as backend:
            children = backend.list_namespaces(resolution.residual)
        return [prefix + child for child in children]

    def namespace_exists(self, namespace: Namespace) -> bool:
        if not namespace:
            return True
        snapshot = self._snapshot()
        resolution = self._resolve(namespace, snapshot)
        if resolution is None:
            wanted = namespace.last.lower()
            return any(
                n.lower() == wanted
                for n in snapshot.list_child_namespaces(namespace.parent)
            )
        with self._backend(resolution) as backend:
            return backend.namespace_exists(resolution.residual)

    def load_namespace_metadata(self, namespace: Namespace) -> dict[str, str]:
        return {}

    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str] | None = None
    ) -> None:
        props = dict(properties or {})
        resolution = self._resolve(namespace)
        if resolution is None:
            self.registry.create_namespace(namespace, props)
            return
        with self._backend(resolution) as backend:
            backend.create_namespace(resolution.residual, props)

    def drop_namespace(self, namespace: Namespace, cascade: bool = False) -> bool:
        if is_reserved_root(namespace):
            raise UnsupportedOperation(
                "deleting root namespace(datasource, metastore) is not allowed"
            )
        resolution = self._resolve(namespace)
        if resolution is None:
            self.registry.drop_namespace(namespace, cascade)
            return True
        with self._backend(resolution) as backend:
            return backend.drop_namespace(resolution.residual, cascade)


@dataclass(frozen=True)
class TableDropResult:
    """Result for a single table drop in a bulk operation."""

    table: str
    dropped: bool
    error: str | None = None


def filter_tables(tables: list[Identifier], name_regex: str | None) -> list[Identifier]:
    """Filter identifiers by regex on the table name (or keep all if regex is None)."""
    if not name_regex:
        return tables
    rx = re.compile(name_regex)
    return [t for t in tables if rx.search(t.name)]


def drop_tables(
    catalog: FederatedCatalog,
    identifiers: Iterable[Identifier],
    *,
    dry_run: bool = False,
) -> list[TableDropResult]:
    """Drop each table, collecting a per-table result instead of stopping at the first error."""
    results: list[TableDropResult] = []
    for ident in identifiers:
        if dry_run:
            results.append(TableDropResult(table=str(ident), dropped=False))
            continue
        try:
            dropped = catalog.drop_table(ident)
            results.append(TableDropResult(table=str(ident), dropped=dropped))
        except Exception as e:  # noqa: BLE001
            results.append(TableDropResult(table=str(ident), dropped=False, error=str(e)))
    return results
