"""Translate CLI arguments into core filter and property objects.

`--where` expressions take the form `<column><op><value>` with op one of
`=`, `!=`, `>=`, `<=`, `>`, `<` or `~` (substring). Values of numeric
columns are parsed as integers.
"""

from __future__ import annotations

import re
from typing import Iterable

from fedcat.core.unstructured.columns import MODIFIEDAT, SIZEINBYTES
from fedcat.core.unstructured.filters import (
    EqualTo,
    GreaterThan,
    GreaterThanOrEqual,
    LessThan,
    LessThanOrEqual,
    Not,
    PushedFilter,
    StringContains,
)

_NUMERIC = {MODIFIEDAT, SIZEINBYTES}
_EXPR = re.compile(r"^\s*([A-Za-z_]+)\s*(!=|>=|<=|=|>|<|~)\s*(.*?)\s*$")


def _value(column: str, raw: str):
    if column.lower() in _NUMERIC:
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"Column '{column}' needs an integer, got '{raw}'") from exc
    return raw


def build_filter(expr: str) -> PushedFilter:
    """Parse a single `--where` expression into a pushed filter."""
    match = _EXPR.match(expr)
    if not match:
        raise ValueError(f"Invalid filter: '{expr}' (expected column<op>value)")
    column, op, raw = match.groups()
    value = _value(column, raw)

    if op == "=":
        return EqualTo(column, value)
    if op == "!=":
        return Not(EqualTo(column, value))
    if op == ">":
        return GreaterThan(column, value)
    if op == ">=":
        return GreaterThanOrEqual(column, value)
    if op == "<":
        return LessThan(column, value)
    if op == "<=":
        return LessThanOrEqual(column, value)
    return StringContains(column, raw)


def build_filters(exprs: Iterable[str]) -> list[PushedFilter]:
    """Parse every `--where` expression; they combine with AND."""
    return [build_filter(e) for e in exprs]


def parse_properties(pairs: Iterable[str]) -> dict[str, str]:
    """Parse `key=value` pairs into a mapping."""
    props: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid property: '{pair}' (expected key=value)")
        key, value = pair.split("=", 1)
        if not key.strip():
            raise ValueError(f"Invalid property: '{pair}' (empty key)")
        props[key.strip()] = value
    return props
