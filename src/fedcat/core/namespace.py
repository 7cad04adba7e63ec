"""Namespace and identifier value types.

A namespace is an ordered sequence of segments compared case-insensitively.
The original spelling of each segment is kept for display and for handing
names to backends.
"""

from __future__ import annotations

from typing import Iterable, Iterator, overload

DATASOURCE_ROOT = "datasource"
METASTORE_ROOT = "metastore"
ROOT_NAMESPACES = (DATASOURCE_ROOT, METASTORE_ROOT)

SYSTEM_NAMESPACE = "lightning"


class Namespace:
    """Immutable, case-insensitive sequence of namespace segments."""

    __slots__ = ("_segments", "_key")

    def __init__(self, segments: Iterable[str] = ()) -> None:
        self._segments = tuple(str(s) for s in segments)
        self._key = tuple(s.lower() for s in self._segments)

    @classmethod
    def parse(cls, dotted: str) -> Namespace:
        """Build a namespace from `a.b.c` (empty string -> empty namespace)."""
        dotted = dotted.strip()
        if not dotted:
            return cls()
        parts = dotted.split(".")
        if any(not p for p in parts):
            raise ValueError(f"Invalid namespace: '{dotted}'")
        return cls(parts)

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def key(self) -> tuple[str, ...]:
        """Lower-cased segments, used for lookups."""
        return self._key

    @property
    def last(self) -> str:
        return self._segments[-1]

    @property
    def parent(self) -> Namespace:
        return Namespace(self._segments[:-1])

    def drop(self, n: int) -> Namespace:
        """Return the namespace without its first `n` segments."""
        return Namespace(self._segments[n:])

    def child(self, name: str) -> Namespace:
        return Namespace(self._segments + (name,))

    def startswith(self, prefix: Namespace) -> bool:
        return self._key[: len(prefix)] == prefix.key

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def __bool__(self) -> bool:
        return bool(self._segments)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Namespace: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Namespace(self._segments[index])
        return self._segments[index]

    def __add__(self, other: Namespace | Iterable[str]) -> Namespace:
        return Namespace(self._segments + tuple(other))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Namespace):
            return self._key == other._key
        if isinstance(other, (list, tuple)):
            return self._key == tuple(str(s).lower() for s in other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        return f"Namespace({list(self._segments)!r})"

    def __str__(self) -> str:
        return ".".join(self._segments)


def is_reserved_root(namespace: Namespace) -> bool:
    """True for a single-segment namespace naming one of the reserved roots."""
    return len(namespace) == 1 and namespace.key[0] in ROOT_NAMESPACES


class Identifier:
    """A table identifier: namespace plus table name."""

    __slots__ = ("namespace", "name")

    def __init__(self, namespace: Namespace | Iterable[str], name: str) -> None:
        self.namespace = (
            namespace if isinstance(namespace, Namespace) else Namespace(namespace)
        )
        self.name = name

    @classmethod
    def of(cls, segments: Iterable[str], name: str) -> Identifier:
        return cls(Namespace(segments), name)

    @classmethod
    def parse(cls, dotted: str) -> Identifier:
        """Split `a.b.table` into namespace `a.b` and name `table`."""
        full = Namespace.parse(dotted)
        if not full:
            raise ValueError("Table identifier must not be empty.")
        return cls(full.parent, full.last)

    def with_namespace(self, namespace: Namespace) -> Identifier:
        return Identifier(namespace, self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return (
            self.namespace == other.namespace
            and self.name.lower() == other.name.lower()
        )

    def __hash__(self) -> int:
        return hash((self.namespace, self.name.lower()))

    def __repr__(self) -> str:
        return f"Identifier({list(self.namespace)!r}, {self.name!r})"

    def __str__(self) -> str:
        if not self.namespace:
            return self.name
        return f"{self.namespace}.{self.name}"
