"""Argument parsing helpers that turn invalid input into CLI usage errors."""

from __future__ import annotations

import re

import typer

from fedcat.cli.common.output import out
from fedcat.core.namespace import Identifier, Namespace


def namespace_or_exit(value: str) -> Namespace:
    """Parse a dotted namespace (`a.b.c`)."""
    try:
        return Namespace.parse(value)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc


def identifier_or_exit(value: str) -> Identifier:
    """Parse a dotted table identifier (`a.b.table`)."""
    try:
        return Identifier.parse(value)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc


def compile_regex_or_exit(pattern: str | None, *, option_name: str) -> re.Pattern | None:
    """Compile a regex pattern and convert invalid syntax into CLI input errors."""
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        out.error(f"Invalid regex for {option_name}: {exc}")
        raise typer.Exit(2) from exc
