"""Fixed internal catalog serving registry contents as tables.

Identifiers under the `lightning` system namespace do not route to a
datasource; they are answered straight from the metadata registry.
"""

from __future__ import annotations

from fedcat.core.errors import TableNotFound
from fedcat.core.namespace import SYSTEM_NAMESPACE, Identifier, Namespace
from fedcat.core.registry import MetadataRegistry
from fedcat.core.tables import Column, SystemTable

DATASOURCES_TABLE = "datasources"
NAMESPACES_TABLE = "namespaces"


class SystemCatalog:
    """Read-only tables describing the registry."""

    def __init__(self, registry: MetadataRegistry) -> None:
        self.registry = registry

    def list_tables(self) -> list[Identifier]:
        ns = Namespace([SYSTEM_NAMESPACE])
        return [Identifier(ns, DATASOURCES_TABLE), Identifier(ns, NAMESPACES_TABLE)]

    def load_table(self, identifier: Identifier) -> SystemTable:
        if identifier.namespace == [SYSTEM_NAMESPACE]:
            name = identifier.name.lower()
            if name == DATASOURCES_TABLE:
                return self._datasources(identifier)
            if name == NAMESPACES_TABLE:
                return self._namespaces(identifier)
        raise TableNotFound(f"table({identifier}) does not exist")

    def _datasources(self, identifier: Identifier) -> SystemTable:
        rows = tuple(
            (str(ds.namespace), ds.name, ds.kind.value)
            for ds in self.registry.list_datasources()
        )
        return SystemTable(
            identifier=identifier,
            columns=(
                Column("namespace", "string", nullable=False),
                Column("name", "string", nullable=False),
                Column("kind", "string", nullable=False),
            ),
            data=rows,
        )

    def _namespaces(self, identifier: Identifier) -> SystemTable:
        rows = tuple((str(ns),) for ns in self.registry.list_all_namespaces())
        return SystemTable(
            identifier=identifier,
            columns=(Column("namespace", "string", nullable=False),),
            data=rows,
        )
