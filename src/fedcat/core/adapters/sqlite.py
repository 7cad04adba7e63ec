"""Relational backend over a SQLite database file.

SQLite exposes a single schema, `main`, so the backend namespace is either
empty or `main`.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Mapping, Sequence

from fedcat.core.backends import BackendCatalog
from fedcat.core.errors import (
    ConfigurationError,
    InvalidNamespace,
    TableAlreadyExists,
    TableNotFound,
    UnsupportedOperation,
)
from fedcat.core.models import DatasourceDefinition
from fedcat.core.namespace import Identifier, Namespace
from fedcat.core.tables import Column, TableInfo

logger = logging.getLogger(__name__)

MAIN_SCHEMA = "main"


def _quote(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class SqliteCatalog(BackendCatalog):
    """Catalog over one SQLite database."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @classmethod
    def from_datasource(cls, datasource: DatasourceDefinition) -> SqliteCatalog:
        path = datasource.properties.get("path")
        if not path:
            raise ConfigurationError(
                f"Datasource {datasource.full_namespace} needs a 'path' property."
            )
        return cls(Path(path).expanduser())

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.path)

    @staticmethod
    def _check(namespace: Namespace) -> None:
        if namespace and namespace != [MAIN_SCHEMA]:
            raise InvalidNamespace(
                f"SQLite only has the '{MAIN_SCHEMA}' namespace, got '{namespace}'"
            )

    def _exists(self, conn: sqlite3.Connection, name: str) -> bool:
        row = conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type IN ('table', 'view') "
            "AND lower(name) = lower(?)",
            (name,),
        ).fetchone()
        return row is not None

    def list_tables(self, namespace: Namespace) -> list[Identifier]:
        self._check(namespace)
        with closing(self._connect()) as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type IN ('table', 'view') "
                "AND name NOT LIKE 'sqlite_%' ORDER BY name"
            ).fetchall()
        return [Identifier(namespace, name) for (name,) in rows]

    def load_table(self, identifier: Identifier) -> TableInfo:
        self._check(identifier.namespace)
        with closing(self._connect()) as conn:
            row = conn.execute(
                "SELECT name, type FROM sqlite_master WHERE type IN ('table', 'view') "
                "AND lower(name) = lower(?)",
                (identifier.name,),
            ).fetchone()
            if row is None:
                raise TableNotFound(f"table({identifier}) does not exist")
            name, table_type = row
            info = conn.execute(f"PRAGMA table_info({_quote(name)})").fetchall()
        columns = tuple(
            Column(name=col[1], data_type=col[2] or "", nullable=not col[3])
            for col in info
        )
        return TableInfo(
            identifier=Identifier(identifier.namespace, name),
            columns=columns,
            table_type=table_type.upper(),
        )

    def create_table(
        self,
        identifier: Identifier,
        columns: Sequence[Column],
        partitioning: Sequence[str],
        properties: Mapping[str, str],
    ) -> TableInfo:
        self._check(identifier.namespace)
        if partitioning:
            raise UnsupportedOperation("SQLite tables cannot be partitioned")
        if not columns:
            raise ValueError("A SQLite table needs at least one column.")
        defs = ", ".join(
            f"{_quote(c.name)} {c.data_type}{'' if c.nullable else ' NOT NULL'}"
            for c in columns
        )
        with closing(self._connect()) as conn:
            if self._exists(conn, identifier.name):
                raise TableAlreadyExists(f"table({identifier}) already exists")
            with conn:
                conn.execute(f"CREATE TABLE {_quote(identifier.name)} ({defs})")
        logger.info("Created table %s in %s", identifier.name, self.path)
        return self.load_table(identifier)

    def drop_table(self, identifier: Identifier) -> bool:
        self._check(identifier.namespace)
        with closing(self._connect()) as conn:
            if not self._exists(conn, identifier.name):
                return False
            with conn:
                conn.execute(f"DROP TABLE {_quote(identifier.name)}")
        logger.info("Dropped table %s in %s", identifier.name, self.path)
        return True

    def list_namespaces(self, namespace: Namespace) -> list[Namespace]:
        self._check(namespace)
        return [Namespace([MAIN_SCHEMA])] if not namespace else []

    def namespace_exists(self, namespace: Namespace) -> bool:
        return not namespace or namespace == [MAIN_SCHEMA]

    def create_namespace(
        self, namespace: Namespace, properties: Mapping[str, str]
    ) -> None:
        raise UnsupportedOperation("SQLite does not support creating namespaces")

    def drop_namespace(self, namespace: Namespace, cascade: bool) -> bool:
        raise UnsupportedOperation("SQLite does not support dropping namespaces")

    def table_exists(self, identifier: Identifier) -> bool:
        self._check(identifier.namespace)
        with closing(self._connect()) as conn:
            return self._exists(conn, identifier.name)
