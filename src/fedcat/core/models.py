"""Core datasource domain models.

These models describe what is registered in the metadata registry. They are
free of backend SDK types and of CLI concerns so that the resolver, the
dispatcher and the registry implementations can share them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from fedcat.core.errors import ConfigurationError
from fedcat.core.namespace import Namespace


class DatasourceKind(str, Enum):
    """
    Enumeration of supported backend kinds.

    Values:
        DELTA: Built-in table-format store with nested namespaces, backed
               by a directory tree.
        SQLITE: Relational database file.
        UNITY_CATALOG: Databricks Unity Catalog metastore.
        UNSTRUCTURED: Flat tree of unstructured documents (pdf, text).
    """

    DELTA = "delta"
    SQLITE = "sqlite"
    UNITY_CATALOG = "unitycatalog"
    UNSTRUCTURED = "unstructured"

    @classmethod
    def parse(cls, value: str) -> DatasourceKind:
        """Return the kind for `value`, rejecting unknown kinds."""
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            known = ", ".join(k.value for k in cls)
            raise ConfigurationError(
                f"Unknown datasource kind '{value}' (expected one of: {known})"
            ) from exc


@dataclass(frozen=True)
class DatasourceDefinition:
    """
    A datasource registered under a namespace prefix.

    Attributes:
        namespace: Namespace the datasource is registered under.
        name: Datasource name; becomes the next namespace segment.
        kind: Backend kind, selects the BackendCatalog implementation.
        properties: Connection properties handed to the backend.
    """

    namespace: Namespace
    name: str
    kind: DatasourceKind
    properties: Mapping[str, str] = field(default_factory=dict)

    @property
    def full_namespace(self) -> Namespace:
        """The namespace the datasource owns (`namespace` + `name`)."""
        return self.namespace.child(self.name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": list(self.namespace),
            "name": self.name,
            "kind": self.kind.value,
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DatasourceDefinition:
        try:
            namespace = Namespace(payload["namespace"])
            name = str(payload["name"])
            kind = payload["kind"]
        except KeyError as exc:
            raise ConfigurationError(
                f"Datasource definition is missing field {exc}"
            ) from exc
        return cls(
            namespace=namespace,
            name=name,
            kind=DatasourceKind.parse(str(kind)),
            properties={
                str(k): str(v) for k, v in (payload.get("properties") or {}).items()
            },
        )
