"""Pushed-down filter predicates over file metadata records.

The query planner delegates simple predicates to the file scan so rows can
be dropped before they are emitted. Each filter names record columns and
decides whether a fully built MetaData record satisfies it. Filters are
pure and can be combined with And / Or / Not.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable

from fedcat.core.unstructured.columns import ALL_COLUMNS, MetaData


def _column(name: str) -> str:
    column = name.strip().lower()
    if column not in ALL_COLUMNS:
        raise ValueError(f"Unknown column for pushed filter: '{name}'")
    return column


class PushedFilter(ABC):
    """
    Abstract base class for all pushed filters.

    A PushedFilter encapsulates a single predicate over one or more columns
    of a MetaData record.
    """

    @property
    @abstractmethod
    def references(self) -> frozenset[str]:
        """Columns the filter reads."""
        ...

    @abstractmethod
    def matches(self, record: MetaData) -> bool:
        """
        Determine whether the record satisfies this filter.

        Args:
            record: MetaData instance with every referenced field populated.

        Returns:
            True if the record satisfies the filter, False otherwise.
        """
        ...


class _ColumnFilter(PushedFilter):
    """Filter on a single column compared with a constant."""

    symbol = "?"

    def __init__(self, attribute: str, value: Any = None):
        self.attribute = _column(attribute)
        self.value = value

    @property
    def references(self) -> frozenset[str]:
        return frozenset({self.attribute})

    def matches(self, record: MetaData) -> bool:
        actual = record.value(self.attribute)
        if actual is None or self.value is None:
            return False
        try:
            return self._test(actual)
        except TypeError:
            return False

    def _test(self, actual: Any) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.attribute} {self.symbol} {self.value!r}"


class EqualTo(_ColumnFilter):
    symbol = "="

    def _test(self, actual: Any) -> bool:
        return actual == self.value


class EqualNullSafe(_ColumnFilter):
    """Equality that treats two nulls as equal."""

    symbol = "<=>"

    def matches(self, record: MetaData) -> bool:
        return record.value(self.attribute) == self.value


class GreaterThan(_ColumnFilter):
    symbol = ">"

    def _test(self, actual: Any) -> bool:
        return actual > self.value


class GreaterThanOrEqual(_ColumnFilter):
    symbol = ">="

    def _test(self, actual: Any) -> bool:
        return actual >= self.value


class LessThan(_ColumnFilter):
    symbol = "<"

    def _test(self, actual: Any) -> bool:
        return actual < self.value


class LessThanOrEqual(_ColumnFilter):
    symbol = "<="

    def _test(self, actual: Any) -> bool:
        return actual <= self.value


class In(_ColumnFilter):
    symbol = "IN"

    def __init__(self, attribute: str, values: Iterable[Any]):
        super().__init__(attribute, tuple(values))

    def _test(self, actual: Any) -> bool:
        return actual in self.value


class StringStartsWith(_ColumnFilter):
    symbol = "STARTS WITH"

    def _test(self, actual: Any) -> bool:
        return str(actual).startswith(str(self.value))


class StringEndsWith(_ColumnFilter):
    symbol = "ENDS WITH"

    def _test(self, actual: Any) -> bool:
        return str(actual).endswith(str(self.value))


class StringContains(_ColumnFilter):
    symbol = "CONTAINS"

    def _test(self, actual: Any) -> bool:
        return str(self.value) in str(actual)


class IsNull(PushedFilter):
    def __init__(self, attribute: str):
        self.attribute = _column(attribute)

    @property
    def references(self) -> frozenset[str]:
        return frozenset({self.attribute})

    def matches(self, record: MetaData) -> bool:
        return record.value(self.attribute) is None


class IsNotNull(IsNull):
    def matches(self, record: MetaData) -> bool:
        return record.value(self.attribute) is not None


class _Composite(PushedFilter):
    def __init__(self, filters: list[PushedFilter]):
        self.filters = filters

    @property
    def references(self) -> frozenset[str]:
        return frozenset().union(*(f.references for f in self.filters))


class And(_Composite):
    """
    Composite filter that matches only if all child filters match.
    """

    def matches(self, record: MetaData) -> bool:
        return all(f.matches(record) for f in self.filters)


class Or(_Composite):
    """
    Composite filter that matches if any child filter matches.
    """

    def matches(self, record: MetaData) -> bool:
        return any(f.matches(record) for f in self.filters)


class Not(PushedFilter):
    def __init__(self, child: PushedFilter):
        self.child = child

    @property
    def references(self) -> frozenset[str]:
        return self.child.references

    def matches(self, record: MetaData) -> bool:
        return not self.child.matches(record)


def referenced_columns(filters: Iterable[PushedFilter]) -> frozenset[str]:
    """Union of the columns read by `filters`."""
    return frozenset().union(*(f.references for f in filters))


def evaluate(filters: Iterable[PushedFilter], record: MetaData) -> bool:
    """
    Decide whether a record passes every pushed filter.

    An empty filter set always passes; otherwise filters combine with AND.
    """
    return all(f.matches(record) for f in filters)
