"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from fedcat.cli.common.tui_style import (
    DESTRUCTIVE_STYLE,
    PICKER_STYLE,
)

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)

_MAX_CELL_WIDTH = 60


def _cell(value: Any) -> str:
    """Render a row value for a table cell."""
    if value is None:
        return "[meta]null[/]"
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    text = str(value).replace("\n", " ")
    if len(text) > _MAX_CELL_WIDTH:
        return f"{text[: _MAX_CELL_WIDTH - 3]}..."
    return text


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "checked_icon", "unchecked_icon", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be fedcat consistent."""
        return f"[fedcat] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=DESTRUCTIVE_STYLE,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def select_many(self, message: str, choices: list[str]) -> list[str]:
        """Prompt the user to select multiple items from a list."""
        if not choices:
            return []

        prompt = self._q_try(
            questionary.checkbox,
            self._q(message),
            choices=choices,
            style=PICKER_STYLE,
            qmark="✦",
            instruction="Use ↑/↓, space, a (all), i (invert), enter",
            pointer="❯",
            checked_icon="▣",
            unchecked_icon="▢",
        )
        return list(prompt.ask() or [])

    def namespaces_table(self, namespaces: Iterable[Any], title: str = "Namespaces") -> None:
        """Render a table of namespaces."""
        t = Table(title=title, show_lines=False)
        t.add_column("Namespace", style="ok")

        for ns in namespaces:
            t.add_row(str(ns))

        console.print(t)

    def tables_table(self, tables: Iterable[Any], title: str = "Tables") -> None:
        """Render a table of identifiers."""
        t = Table(title=title, show_lines=False)
        t.add_column("Table", style="ok")

        for ident in tables:
            t.add_row(str(ident))

        console.print(t)

    def schema_table(self, table: Any, title: str = "Schema") -> None:
        """
        Render the columns of a loaded table.

        Expects an object with `.columns` (name, data_type, nullable).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Column", style="ok")
        t.add_column("Type")
        t.add_column("Nullable", style="meta")

        for c in getattr(table, "columns", ()):
            t.add_row(c.name, c.data_type, "yes" if c.nullable else "no")

        console.print(t)

    def datasources_table(self, datasources: Iterable[Any], title: str = "Datasources") -> None:
        """Render registered datasources (objects with .full_namespace and .kind)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Datasource", style="ok")
        t.add_column("Kind")
        t.add_column("Properties", style="meta")

        for ds in datasources:
            props = ", ".join(
                f"{k}={'***' if k == 'token' else v}" for k, v in ds.properties.items()
            )
            t.add_row(str(ds.full_namespace), ds.kind.value, props)

        console.print(t)

    def rows_table(
        self, columns: Sequence[str], rows: Iterable[Sequence[Any]], title: str = "Rows"
    ) -> None:
        """Render arbitrary rows under the given column headers."""
        t = Table(title=title, show_lines=False)
        for name in columns:
            t.add_column(name)

        for row in rows:
            t.add_row(*(_cell(v) for v in row))

        console.print(t)

    def scan_errors_table(self, results: Iterable[Any], title: str = "Scan errors") -> None:
        """Render files that failed to scan (objects with .path and .error)."""
        t = Table(title=title, show_lines=False)
        t.add_column("File", style="ok")
        t.add_column("Error", style="err")

        for r in results:
            t.add_row(str(r.path), str(r.error or ""))

        console.print(t)


out = Out()
