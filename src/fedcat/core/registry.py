"""Metadata registry: namespace trees and datasource definitions.

The registry is the source of truth for which datasource owns which part of
the virtual namespace. Two implementations are provided: an in-memory tree
(used by tests and embedding applications) and a JSON file store used by the
CLI.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Mapping, Protocol, TypeVar

from fedcat.core.errors import (
    ConfigurationError,
    InvalidNamespace,
    NamespaceAlreadyExists,
    NamespaceNotDefined,
    NamespaceNotEmpty,
)
from fedcat.core.models import DatasourceDefinition
from fedcat.core.namespace import ROOT_NAMESPACES, Namespace

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MetadataRegistry(Protocol):
    """Interface for the registry operations used by the catalog."""

    def lookup_datasource(
        self, owner_namespace: Namespace, name: str
    ) -> DatasourceDefinition | None:
        """Return the datasource `name` registered directly under `owner_namespace`."""
        ...

    def list_child_namespaces(self, namespace: Namespace) -> list[str]:
        """Return the names of the immediate children of `namespace`."""
        ...

    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str]
    ) -> None:
        """Create `namespace`; its parent must already exist."""
        ...

    def drop_namespace(self, namespace: Namespace, cascade: bool) -> bool:
        """Drop `namespace` (and everything below it when `cascade`)."""
        ...

    def register_datasource(self, definition: DatasourceDefinition) -> None:
        """Register a datasource under its owner namespace."""
        ...

    def unregister_datasource(self, namespace: Namespace, name: str) -> bool:
        """Remove a datasource registration; False if it was not registered."""
        ...

    def list_datasources(self) -> list[DatasourceDefinition]:
        """Return every registered datasource."""
        ...

    def list_all_namespaces(self) -> list[Namespace]:
        """Return every namespace in the tree, parents before children."""
        ...

    def snapshot(self) -> MetadataRegistry:
        """Return a read-consistent view for the duration of one catalog call."""
        ...


def _new_node(name: str, properties: Mapping[str, str] | None = None) -> dict:
    return {
        "name": name,
        "properties": dict(properties or {}),
        "children": {},
        "datasources": {},
    }


def _empty_tree() -> dict:
    root = _new_node("")
    for name in ROOT_NAMESPACES:
        root["children"][name] = _new_node(name)
    return root


class InMemoryRegistry:
    """Lock-guarded in-memory namespace tree."""

    def __init__(self, tree: dict | None = None) -> None:
        self._lock = threading.RLock()
        self._root = tree if tree is not None else _empty_tree()
        for name in ROOT_NAMESPACES:
            self._root["children"].setdefault(name, _new_node(name))

    def _node(self, namespace: Namespace) -> dict | None:
        node = self._root
        for key in namespace.key:
            node = node["children"].get(key)
            if node is None:
                return None
        return node

    def lookup_datasource(
        self, owner_namespace: Namespace, name: str
    ) -> DatasourceDefinition | None:
        with self._lock:
            node = self._node(owner_namespace)
            if node is None:
                return None
            payload = node["datasources"].get(name.lower())
            return DatasourceDefinition.from_dict(payload) if payload else None

    def list_child_namespaces(self, namespace: Namespace) -> list[str]:
        with self._lock:
            node = self._node(namespace)
            if node is None:
                return []
            names = [child["name"] for child in node["children"].values()]
            names.extend(ds["name"] for ds in node["datasources"].values())
            return names

    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str]
    ) -> None:
        if not namespace:
            raise InvalidNamespace("Cannot create the empty namespace.")
        with self._lock:
            parent = self._node(namespace.parent)
            if parent is None:
                raise NamespaceNotDefined(namespace.parent)
            key = namespace.key[-1]
            if key in parent["children"] or key in parent["datasources"]:
                raise NamespaceAlreadyExists(f"namespace({namespace}) already exists")
            parent["children"][key] = _new_node(namespace.last, properties)
            logger.info("Created namespace %s", namespace)

    def drop_namespace(self, namespace: Namespace, cascade: bool) -> bool:
        if not namespace:
            raise InvalidNamespace("Cannot drop the empty namespace.")
        with self._lock:
            parent = self._node(namespace.parent)
            key = namespace.key[-1]
            if parent is None:
                raise NamespaceNotDefined(namespace)
            if key in parent["datasources"]:
                del parent["datasources"][key]
                logger.info("Dropped datasource namespace %s", namespace)
                return True
            node = parent["children"].get(key)
            if node is None:
                raise NamespaceNotDefined(namespace)
            if (node["children"] or node["datasources"]) and not cascade:
                raise NamespaceNotEmpty(
                    f"namespace({namespace}) is not empty; use cascade to drop it"
                )
            del parent["children"][key]
            logger.info("Dropped namespace %s (cascade=%s)", namespace, cascade)
            return True

    def register_datasource(self, definition: DatasourceDefinition) -> None:
        with self._lock:
            node = self._node(definition.namespace)
            if node is None:
                raise NamespaceNotDefined(definition.namespace)
            key = definition.name.lower()
            if key in node["datasources"] or key in node["children"]:
                raise NamespaceAlreadyExists(
                    f"namespace({definition.full_namespace}) already exists"
                )
            node["datasources"][key] = definition.to_dict()
            logger.info(
                "Registered %s datasource %s",
                definition.kind.value,
                definition.full_namespace,
            )

    def unregister_datasource(self, namespace: Namespace, name: str) -> bool:
        with self._lock:
            node = self._node(namespace)
            if node is None:
                return False
            return node["datasources"].pop(name.lower(), None) is not None

    def list_datasources(self) -> list[DatasourceDefinition]:
        with self._lock:
            found: list[DatasourceDefinition] = []
            stack = [self._root]
            while stack:
                node = stack.pop()
                found.extend(
                    DatasourceDefinition.from_dict(p)
                    for p in node["datasources"].values()
                )
                stack.extend(reversed(list(node["children"].values())))
            return found

    def list_all_namespaces(self) -> list[Namespace]:
        with self._lock:
            found: list[Namespace] = []
            stack = [(Namespace(), self._root)]
            while stack:
                path, node = stack.pop()
                if path:
                    found.append(path)
                children = [
                    (path.child(child["name"]), child)
                    for child in node["children"].values()
                ]
                stack.extend(reversed(children))
            return found

    def snapshot(self) -> InMemoryRegistry:
        with self._lock:
            return InMemoryRegistry(copy.deepcopy(self._root))

    def to_dict(self) -> dict:
        with self._lock:
            return copy.deepcopy(self._root)


class JsonFileRegistry:
    """Registry persisted as a JSON document on disk.

    Every operation re-reads the file so that the file stays the source of
    truth across processes; mutations are written back atomically.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()

    def _load(self) -> InMemoryRegistry:
        if not self.path.exists():
            return InMemoryRegistry()
        try:
            payload = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(
                f"Registry file '{self.path}' is unreadable: {exc}"
            ) from exc
        if not isinstance(payload, dict) or "children" not in payload:
            raise ConfigurationError(f"Registry file '{self.path}' is malformed.")
        return InMemoryRegistry(payload)

    def _store(self, registry: InMemoryRegistry) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as fh:
                json.dump(registry.to_dict(), fh, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _read(self, fn: Callable[[InMemoryRegistry], T]) -> T:
        with self._lock:
            return fn(self._load())

    def _mutate(self, fn: Callable[[InMemoryRegistry], T]) -> T:
        with self._lock:
            registry = self._load()
            result = fn(registry)
            self._store(registry)
            return result

    def lookup_datasource(
        self, owner_namespace: Namespace, name: str
    ) -> DatasourceDefinition | None:
        return self._read(lambda r: r.lookup_datasource(owner_namespace, name))

    def list_child_namespaces(self, namespace: Namespace) -> list[str]:
        return self._read(lambda r: r.list_child_namespaces(namespace))

    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str]
    ) -> None:
        self._mutate(lambda r: r.create_namespace(namespace, properties))

    def drop_namespace(self, namespace: Namespace, cascade: bool) -> bool:
        return self._mutate(lambda r: r.drop_namespace(namespace, cascade))

    def register_datasource(self, definition: DatasourceDefinition) -> None:
        self._mutate(lambda r: r.register_datasource(definition))

    def unregister_datasource(self, namespace: Namespace, name: str) -> bool:
        return self._mutate(lambda r: r.unregister_datasource(namespace, name))

    def list_datasources(self) -> list[DatasourceDefinition]:
        return self._read(lambda r: r.list_datasources())

    def list_all_namespaces(self) -> list[Namespace]:
        return self._read(lambda r: r.list_all_namespaces())

    def snapshot(self) -> InMemoryRegistry:
        return self._read(lambda r: r)

