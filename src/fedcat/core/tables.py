"""Table descriptions returned by catalog operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Protocol, Sequence

from fedcat.core.namespace import Identifier


@dataclass(frozen=True)
class Column:
    """A single column of a table schema."""

    name: str
    data_type: str
    nullable: bool = True
    comment: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "data_type": self.data_type,
            "nullable": self.nullable,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Column:
        return cls(
            name=str(payload["name"]),
            data_type=str(payload["data_type"]),
            nullable=bool(payload.get("nullable", True)),
            comment=payload.get("comment"),
        )


class Table(Protocol):
    """Anything a catalog hands back from `load_table`."""

    identifier: Identifier
    columns: Sequence[Column]
    table_type: str


@dataclass(frozen=True)
class TableInfo:
    """Lightweight description of a structured backend table."""

    identifier: Identifier
    columns: tuple[Column, ...] = ()
    properties: Mapping[str, str] = field(default_factory=dict)
    table_type: str = "TABLE"


@dataclass(frozen=True)
class SystemTable:
    """A read-only table materialized from the metadata registry."""

    identifier: Identifier
    columns: tuple[Column, ...]
    data: tuple[tuple[Any, ...], ...]
    table_type: str = "SYSTEM"

    def rows(self) -> Iterator[tuple[Any, ...]]:
        return iter(self.data)
