"""CLI application for the federated catalog."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.logging import RichHandler

from fedcat.cli.commands.datasources import app as datasources_app
from fedcat.cli.commands.files import app as files_app
from fedcat.cli.commands.namespaces import app as namespaces_app
from fedcat.cli.commands.tables import app as tables_app
from fedcat.cli.common.context import build_catalog_context
from fedcat.cli.common.options import RegistryOpt, VerboseOpt
from fedcat.cli.common.output import console
from fedcat.core import config

app = typer.Typer(
    help="fedcat - federated metadata catalog",
    no_args_is_help=True,
)


def _setup_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else config.log_level()
    if not level:
        return
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.callback()
def _init(
    ctx: typer.Context,
    registry: Path | None = RegistryOpt,
    verbose: bool = VerboseOpt,
):
    """Load the registry once per invocation."""
    _setup_logging(verbose)
    ctx.obj = build_catalog_context(registry)


app.add_typer(namespaces_app, name="namespaces")
app.add_typer(tables_app, name="tables")
app.add_typer(datasources_app, name="datasources")
app.add_typer(files_app, name="files")


if __name__ == "__main__":
    app()
