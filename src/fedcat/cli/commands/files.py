"""Commands for scanning unstructured file trees directly."""

from __future__ import annotations

from pathlib import Path

import typer

from fedcat.cli.common.args import identifier_or_exit
from fedcat.cli.common.context import CatalogAppContext
from fedcat.cli.common.exits import exit_from_exc
from fedcat.cli.common.filter_builder import build_filters
from fedcat.cli.common.options import ParallelOpt
from fedcat.cli.common.output import out
from fedcat.core.errors import CatalogError
from fedcat.core.unstructured.columns import ProjectionMode
from fedcat.core.unstructured.reader import list_files, scan_files

app = typer.Typer(help="Scan unstructured document trees.", no_args_is_help=True)


def _report(columns: list[str], results) -> None:
    emitted = [r for r in results if r.emitted]
    failed = [r for r in results if r.error]

    out.info(f"Files: {len(results)} | Rows: {len(emitted)} | Errors: {len(failed)}")
    if emitted:
        out.rows_table(columns, [r.row for r in emitted], title="Rows")
    if failed:
        out.scan_errors_table(failed)
        raise typer.Exit(1)


@app.command("scan")
def scan(
    ctx: typer.Context,
    roots: list[Path] = typer.Argument(..., help="Root directories to scan"),
    mode: ProjectionMode = typer.Option(
        ProjectionMode.METADATA, "--mode", "-m", help="Projection mode"
    ),
    column: list[str] = typer.Option(
        [], "--column", "-c", help="Column to project (reusable; default: all)"
    ),
    where: list[str] = typer.Option(
        [], "--where", "-w", help="Pushed filter, e.g. sizeinbytes>1000 (reusable, AND)"
    ),
    file_format: str = typer.Option("pdf", "--format", "-f", help="Document format"),
    preview_len: int | None = typer.Option(
        None, "--preview-len", help="Preview length in characters (0 = full text)"
    ),
    parallel: int | None = ParallelOpt,
):
    """Scan document trees and print one row per matching file."""
    try:
        filters = build_filters(where)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc

    columns = column or [c.name for c in mode.columns]
    try:
        with out.status("Scanning files..."):
            files = list_files(roots, file_format)
            results = scan_files(
                files,
                columns,
                mode=mode,
                root_paths=roots,
                file_format=file_format,
                preview_len=preview_len,
                filters=filters,
                max_parallel=parallel,
            )
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    out.header(f"Scan ({mode.value})")
    _report(columns, results)


@app.command("query")
def query(
    ctx: typer.Context,
    table: str = typer.Argument(
        ..., help="File table identifier, e.g. datasource.docs.metadata"
    ),
    column: list[str] = typer.Option([], "--column", "-c", help="Column to project"),
    where: list[str] = typer.Option([], "--where", "-w", help="Pushed filter"),
    parallel: int | None = ParallelOpt,
):
    """Scan a registered file table through the catalog."""
    appctx: CatalogAppContext = ctx.obj
    ident = identifier_or_exit(table)
    try:
        filters = build_filters(where)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc

    try:
        loaded = appctx.catalog.load_table(ident)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if not callable(getattr(loaded, "scan", None)):
        out.error(f"Table '{ident}' is not a file table.")
        raise typer.Exit(2)

    columns = column or [c.name for c in loaded.columns]
    try:
        with out.status("Scanning files..."):
            results = loaded.scan(columns, filters, max_parallel=parallel)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    out.header(str(ident))
    _report(columns, results)
