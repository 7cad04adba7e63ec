"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from fedcat.cli.common.output import out


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """
    Print an error message and exit with `code`, chaining the original error.

    Every command maps CatalogError to a non-zero exit through here.
    """
    out.error(message)
    raise typer.Exit(code) from exc
