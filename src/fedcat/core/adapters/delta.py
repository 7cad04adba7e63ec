"""Built-in table-format store with nested namespaces.

Namespaces are directories and tables are directories holding a
`_fedcat_table.json` descriptor. Each top-level entry of the store is a
self-contained flat catalog, so table listings are scoped to the last
segment of the requested namespace.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Mapping, Sequence

from fedcat.core.backends import BackendCatalog
from fedcat.core.errors import (
    ConfigurationError,
    InvalidNamespace,
    NamespaceAlreadyExists,
    NamespaceNotDefined,
    NamespaceNotEmpty,
    TableAlreadyExists,
    TableNotFound,
)
from fedcat.core.models import DatasourceDefinition
from fedcat.core.namespace import Identifier, Namespace
from fedcat.core.tables import Column, TableInfo

logger = logging.getLogger(__name__)

TABLE_DESCRIPTOR = "_fedcat_table.json"
NAMESPACE_DESCRIPTOR = "_fedcat_namespace.json"


class DeltaCatalog(BackendCatalog):
    """Directory-backed catalog for table-format stores."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @classmethod
    def from_datasource(cls, datasource: DatasourceDefinition) -> DeltaCatalog:
        path = datasource.properties.get("path")
        if not path:
            raise ConfigurationError(
                f"Datasource {datasource.full_namespace} needs a 'path' property."
            )
        return cls(Path(path).expanduser())

    def listing_namespace(self, namespace: Namespace, residual: Namespace) -> Namespace:
        return namespace[-1:]

    def _dir(self, namespace: Namespace) -> Path:
        return self.root.joinpath(*namespace.key)

    def _table_dir(self, identifier: Identifier) -> Path:
        return self._dir(identifier.namespace) / identifier.name.lower()

    @staticmethod
    def _is_table(path: Path) -> bool:
        return (path / TABLE_DESCRIPTOR).is_file()

    def list_tables(self, namespace: Namespace) -> list[Identifier]:
        base = self._dir(namespace)
        if not base.is_dir():
            return []
        out: list[Identifier] = []
        for child in sorted(base.iterdir()):
            if child.is_dir() and self._is_table(child):
                payload = json.loads((child / TABLE_DESCRIPTOR).read_text())
                out.append(Identifier(namespace, payload.get("name", child.name)))
        return out

    def load_table(self, identifier: Identifier) -> TableInfo:
        path = self._table_dir(identifier)
        if not self._is_table(path):
            raise TableNotFound(f"table({identifier}) does not exist")
        payload = json.loads((path / TABLE_DESCRIPTOR).read_text())
        properties = dict(payload.get("properties") or {})
        if payload.get("partitioning"):
            properties["partitioning"] = ",".join(payload["partitioning"])
        return TableInfo(
            identifier=Identifier(identifier.namespace, payload.get("name", identifier.name)),
            columns=tuple(Column.from_dict(c) for c in payload.get("columns", [])),
            properties=properties,
            table_type="DELTA",
        )

    def create_table(
        self,
        identifier: Identifier,
        columns: Sequence[Column],
        partitioning: Sequence[str],
        properties: Mapping[str, str],
    ) -> TableInfo:
        base = self._dir(identifier.namespace)
        if not base.is_dir():
            raise NamespaceNotDefined(identifier.namespace)
        names = {c.name.lower() for c in columns}
        missing = [p for p in partitioning if p.lower() not in names]
        if missing:
            raise ValueError(f"Partition columns not in schema: {', '.join(missing)}")

        path = self._table_dir(identifier)
        if path.exists():
            raise TableAlreadyExists(f"table({identifier}) already exists")
        path.mkdir()
        payload = {
            "name": identifier.name,
            "columns": [c.to_dict() for c in columns],
            "partitioning": list(partitioning),
            "properties": dict(properties),
        }
        (path / TABLE_DESCRIPTOR).write_text(json.dumps(payload, indent=2))
        logger.info("Created table %s under %s", identifier, self.root)
        return self.load_table(identifier)

    def drop_table(self, identifier: Identifier) -> bool:
        path = self._table_dir(identifier)
        if not self._is_table(path):
            return False
        shutil.rmtree(path)
        logger.info("Dropped table %s under %s", identifier, self.root)
        return True

    def list_namespaces(self, namespace: Namespace) -> list[Namespace]:
        base = self._dir(namespace)
        if not base.is_dir():
            raise NamespaceNotDefined(namespace)
        return [
            namespace.child(child.name)
            for child in sorted(base.iterdir())
            if child.is_dir() and not self._is_table(child)
        ]

    def namespace_exists(self, namespace: Namespace) -> bool:
        path = self._dir(namespace)
        return path.is_dir() and not self._is_table(path)

    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str]
    ) -> None:
        if not namespace:
            raise InvalidNamespace("Cannot create the store root.")
        parent = self._dir(namespace.parent)
        if not parent.is_dir():
            raise NamespaceNotDefined(namespace.parent)
        path = self._dir(namespace)
        if path.exists():
            raise NamespaceAlreadyExists(f"namespace({namespace}) already exists")
        path.mkdir()
        if properties:
            (path / NAMESPACE_DESCRIPTOR).write_text(json.dumps(dict(properties)))

    def drop_namespace(self, namespace: Namespace, cascade: bool) -> bool:
        if not namespace:
            raise InvalidNamespace("Cannot drop the store root.")
        path = self._dir(namespace)
        if not self.namespace_exists(namespace):
            return False
        entries = [p for p in path.iterdir() if p.name != NAMESPACE_DESCRIPTOR]
        if entries and not cascade:
            raise NamespaceNotEmpty(
                f"namespace({namespace}) is not empty; use cascade to drop it"
            )
        shutil.rmtree(path)
        return True

    def table_exists(self, identifier: Identifier) -> bool:
        return self._is_table(self._table_dir(identifier))
