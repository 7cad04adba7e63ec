"""Backend catalog contract.

A BackendCatalog performs table and namespace operations against one
concrete external system. Every namespace and identifier it receives is
backend-relative: the routing prefix has already been stripped by the
federated catalog.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from fedcat.core.namespace import Identifier, Namespace
from fedcat.core.tables import Column


class BackendCatalog(ABC):
    """Abstract base class for all backend catalogs."""

    def listing_namespace(self, namespace: Namespace, residual: Namespace) -> Namespace:
        """
        Return the namespace handed to `list_tables`.

        Args:
            namespace: Absolute namespace the caller asked for.
            residual: Namespace with the routing prefix removed.
        """
        return residual

    @abstractmethod
    def list_tables(self, namespace: Namespace) -> list[Identifier]:
        """Return the tables directly under `namespace`."""
        ...

    @abstractmethod
    def load_table(self, identifier: Identifier) -> Any:
        """Return a table description; raise TableNotFound if absent."""
        ...

    @abstractmethod
    def create_table(
        self,
        identifier: Identifier,
        columns: Sequence[Column],
        partitioning: Sequence[str],
        properties: Mapping[str, str],
    ) -> Any:
        """Create a table and return its description."""
        ...

    @abstractmethod
    def drop_table(self, identifier: Identifier) -> bool:
        """Drop a table; False if it did not exist."""
        ...

    @abstractmethod
    def list_namespaces(self, namespace: Namespace) -> list[Namespace]:
        """Return the immediate child namespaces of `namespace`."""
        ...

    @abstractmethod
    def namespace_exists(self, namespace: Namespace) -> bool:
        ...

    @abstractmethod
    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str]
    ) -> None:
        ...

    @abstractmethod
    def drop_namespace(self, namespace: Namespace, cascade: bool) -> bool:
        ...

    @abstractmethod
    def table_exists(self, identifier: Identifier) -> bool:
        ...

    def close(self) -> None:
        """Release connections held by the backend."""
        return None
