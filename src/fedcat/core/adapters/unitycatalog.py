from __future__ import annotations

from typing import Mapping, Sequence

from databricks.sdk import WorkspaceClient
from databricks.sdk.errors import NotFound

from fedcat.core.auth import client_from_properties
from fedcat.core.backends import BackendCatalog
from fedcat.core.errors import InvalidNamespace, TableNotFound, UnsupportedOperation
from fedcat.core.models import DatasourceDefinition
from fedcat.core.namespace import Identifier, Namespace
from fedcat.core.tables import Column, TableInfo


class UnityCatalogBackend(BackendCatalog):
    """Adapter around Databricks SDK Unity Catalog APIs (catalogs/schemas/tables)."""

    def __init__(self, client: WorkspaceClient) -> None:
        self.client = client

    @classmethod
    def from_datasource(cls, datasource: DatasourceDefinition) -> UnityCatalogBackend:
        return cls(client_from_properties(datasource.properties))

    @staticmethod
    def _schema_of(namespace: Namespace) -> tuple[str, str]:
        """Split a backend namespace into (catalog, schema)."""
        if len(namespace) != 2:
            raise InvalidNamespace(
                f"Unity Catalog tables live in `catalog.schema`, got '{namespace}'"
            )
        return namespace[0], namespace[1]

    def _full_name(self, identifier: Identifier) -> str:
        catalog, schema = self._schema_of(identifier.namespace)
        return f"{catalog}.{schema}.{identifier.name}"

    def list_tables(self, namespace: Namespace) -> list[Identifier]:
        catalog, schema = self._schema_of(namespace)
        out: list[Identifier] = []
        for t in self.client.tables.list(catalog_name=catalog, schema_name=schema):
            name = getattr(t, "name", None)
            if not name and getattr(t, "full_name", None):
                name = t.full_name.split(".")[-1]
            if not name:
                continue
            out.append(Identifier(namespace, name))
        return out

    def load_table(self, identifier: Identifier) -> TableInfo:
        full_name = self._full_name(identifier)
        try:
            t = self.client.tables.get(full_name=full_name)
        except NotFound as exc:
            raise TableNotFound(f"table({full_name}) does not exist") from exc

        columns = tuple(
            Column(
                name=c.name,
                data_type=getattr(c, "type_text", None) or "",
                nullable=bool(getattr(c, "nullable", True)),
                comment=getattr(c, "comment", None),
            )
            for c in (getattr(t, "columns", None) or [])
            if getattr(c, "name", None)
        )
        # TableInfo.table_type is an enum in recent SDKs, a string in older ones
        table_type = getattr(t, "table_type", None)
        return TableInfo(
            identifier=identifier,
            columns=columns,
            properties=dict(getattr(t, "properties", None) or {}),
            table_type=str(getattr(table_type, "value", table_type) or "TABLE"),
        )

    def create_table(
        self,
        identifier: Identifier,
        columns: Sequence[Column],
        partitioning: Sequence[str],
        properties: Mapping[str, str],
    ) -> TableInfo:
        raise UnsupportedOperation(
            "Unity Catalog tables must be created through a SQL warehouse"
        )

    def drop_table(self, identifier: Identifier) -> bool:
        full_name = self._full_name(identifier)
        try:
            self.client.tables.delete(full_name=full_name)
        except NotFound:
            return False
        return True

    def list_namespaces(self, namespace: Namespace) -> list[Namespace]:
        if not namespace:
            return [
                Namespace([c.name])
                for c in self.client.catalogs.list()
                if getattr(c, "name", None)
            ]
        if len(namespace) == 1:
            return [
                namespace.child(s.name)
                for s in self.client.schemas.list(catalog_name=namespace[0])
                if getattr(s, "name", None)
            ]
        return []

    def namespace_exists(self, namespace: Namespace) -> bool:
        try:
            if not namespace:
                return True
            if len(namespace) == 1:
                self.client.catalogs.get(name=namespace[0])
                return True
            if len(namespace) == 2:
                self.client.schemas.get(full_name=str(namespace))
                return True
        except NotFound:
            return False
        return False

    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str]
    ) -> None:
        comment = properties.get("comment")
        if len(namespace) == 1:
            self.client.catalogs.create(name=namespace[0], comment=comment)
        elif len(namespace) == 2:
            self.client.schemas.create(
                name=namespace[1], catalog_name=namespace[0], comment=comment
            )
        else:
            raise InvalidNamespace(
                f"Unity Catalog namespaces are `catalog` or `catalog.schema`, got '{namespace}'"
            )

    def drop_namespace(self, namespace: Namespace, cascade: bool) -> bool:
        try:
            if len(namespace) == 1:
                self.client.catalogs.delete(name=namespace[0], force=cascade)
            elif len(namespace) == 2:
                self.client.schemas.delete(full_name=str(namespace), force=cascade)
            else:
                raise InvalidNamespace(
                    f"Unity Catalog namespaces are `catalog` or `catalog.schema`, got '{namespace}'"
                )
        except NotFound:
            return False
        return True

    def table_exists(self, identifier: Identifier) -> bool:
        if len(identifier.namespace) != 2:
            return False
        response = self.client.tables.exists(full_name=self._full_name(identifier))
        return bool(getattr(response, "table_exists", False))
