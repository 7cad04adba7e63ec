"""File-tree backend for unstructured documents.

A file datasource is a flat catalog with two fixed tables over the same set
of root directories: `metadata` (file facts plus a text preview) and
`content` (full text and raw bytes).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

from fedcat.core import config
from fedcat.core.backends import BackendCatalog
from fedcat.core.errors import (
    ConfigurationError,
    NamespaceNotDefined,
    TableNotFound,
    UnsupportedOperation,
)
from fedcat.core.models import DatasourceDefinition
from fedcat.core.namespace import Identifier, Namespace
from fedcat.core.tables import Column
from fedcat.core.unstructured.columns import ProjectionMode
from fedcat.core.unstructured.extract import get_extractor
from fedcat.core.unstructured.filters import PushedFilter
from fedcat.core.unstructured.reader import FileScanResult, list_files, scan_files


@dataclass(frozen=True)
class UnstructuredTable:
    """A loaded file table in one projection mode."""

    identifier: Identifier
    mode: ProjectionMode
    root_paths: tuple[Path, ...]
    file_format: str = "pdf"
    preview_len: int = 0
    properties: Mapping[str, str] = field(default_factory=dict)

    @property
    def table_type(self) -> str:
        return f"UNSTRUCTURED_{self.mode.value.upper()}"

    @property
    def columns(self) -> tuple[Column, ...]:
        return self.mode.columns

    def scan(
        self,
        columns: Sequence[str] | None = None,
        filters: Sequence[PushedFilter] = (),
        *,
        max_parallel: int | None = None,
    ) -> list[FileScanResult]:
        """Scan every file below the root paths; all columns by default."""
        wanted = list(columns) if columns is not None else [c.name for c in self.columns]
        return scan_files(
            list_files(self.root_paths, self.file_format),
            wanted,
            mode=self.mode,
            root_paths=self.root_paths,
            file_format=self.file_format,
            preview_len=self.preview_len,
            filters=filters,
            max_parallel=max_parallel,
        )


class UnstructuredFileCatalog(BackendCatalog):
    """Read-only catalog over root directories of documents."""

    def __init__(
        self,
        root_paths: Sequence[Path],
        *,
        file_format: str = "pdf",
        preview_len: int | None = None,
    ) -> None:
        if not root_paths:
            raise ConfigurationError("A file datasource needs at least one root path.")
        get_extractor(file_format)
        self.root_paths = tuple(Path(p).expanduser().resolve() for p in root_paths)
        self.file_format = file_format.lower()
        self.preview_len = preview_len if preview_len is not None else config.preview_len()

    @classmethod
    def from_datasource(
        cls, datasource: DatasourceDefinition
    ) -> UnstructuredFileCatalog:
        props = datasource.properties
        paths = [p.strip() for p in props.get("paths", "").split(",") if p.strip()]
        if not paths:
            raise ConfigurationError(
                f"Datasource {datasource.full_namespace} needs a 'paths' property."
            )
        raw_len = props.get("preview_len")
        try:
            preview_len = int(raw_len) if raw_len is not None else None
        except ValueError as exc:
            raise ConfigurationError(
                f"preview_len must be an integer, got '{raw_len}'"
            ) from exc
        return cls(
            [Path(p) for p in paths],
            file_format=props.get("format", "pdf"),
            preview_len=preview_len,
        )

    def list_tables(self, namespace: Namespace) -> list[Identifier]:
        if namespace:
            raise NamespaceNotDefined(namespace)
        return [Identifier(namespace, mode.value) for mode in ProjectionMode]

    def load_table(self, identifier: Identifier) -> UnstructuredTable:
        if identifier.namespace:
            raise TableNotFound(f"table({identifier}) does not exist")
        try:
            mode = ProjectionMode(identifier.name.lower())
        except ValueError as exc:
            raise TableNotFound(f"table({identifier}) does not exist") from exc
        return UnstructuredTable(
            identifier=identifier,
            mode=mode,
            root_paths=self.root_paths,
            file_format=self.file_format,
            preview_len=self.preview_len,
            properties={"format": self.file_format},
        )

    def create_table(
        self,
        identifier: Identifier,
        columns: Sequence[Column],
        partitioning: Sequence[str],
        properties: Mapping[str, str],
    ) -> UnstructuredTable:
        raise UnsupportedOperation("File datasources have fixed tables")

    def drop_table(self, identifier: Identifier) -> bool:
        raise UnsupportedOperation("File datasources have fixed tables")

    def list_namespaces(self, namespace: Namespace) -> list[Namespace]:
        if namespace:
            raise NamespaceNotDefined(namespace)
        return []

    def namespace_exists(self, namespace: Namespace) -> bool:
        return not namespace

    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str]
    ) -> None:
        raise UnsupportedOperation("File datasources have no namespaces")

    def drop_namespace(self, namespace: Namespace, cascade: bool) -> bool:
        raise UnsupportedOperation("File datasources have no namespaces")

    def table_exists(self, identifier: Identifier) -> bool:
        return not identifier.namespace and identifier.name.lower() in {
            m.value for m in ProjectionMode
        }
