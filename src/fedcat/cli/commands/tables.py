"""Commands for browsing and dropping tables."""

from __future__ import annotations

import typer

from fedcat.cli.common.args import (
    compile_regex_or_exit,
    identifier_or_exit,
    namespace_or_exit,
)
from fedcat.cli.common.context import CatalogAppContext
from fedcat.cli.common.exits import exit_from_exc
from fedcat.cli.common.options import DryRunOpt, NameOpt, YesOpt
from fedcat.cli.common.output import out
from fedcat.core.catalog import drop_tables, filter_tables
from fedcat.core.errors import CatalogError

app = typer.Typer(help="Browse and drop tables.", no_args_is_help=True)


@app.command("list")
def list_(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace, e.g. datasource.lake.sales"),
    name: str | None = NameOpt,
):
    """List tables in a namespace."""
    appctx: CatalogAppContext = ctx.obj
    ns = namespace_or_exit(namespace)
    compile_regex_or_exit(name, option_name="--name")

    try:
        with out.status("Loading tables..."):
            tables = appctx.catalog.list_tables(ns)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    tables = filter_tables(tables, name)
    if not tables:
        out.warn("No tables found.")
        raise typer.Exit(0)

    out.header("Tables")
    out.info(f"Namespace: {ns} | Tables: {len(tables)}")
    out.tables_table(tables)


@app.command("show")
def show(
    ctx: typer.Context,
    table: str = typer.Argument(..., help="Table identifier, e.g. datasource.db.main.users"),
):
    """Show a table's type and schema."""
    appctx: CatalogAppContext = ctx.obj
    ident = identifier_or_exit(table)

    try:
        with out.status("Loading table..."):
            loaded = appctx.catalog.load_table(ident)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    out.header(str(ident))
    out.kv({"Type": loaded.table_type, **dict(getattr(loaded, "properties", {}) or {})})
    out.schema_table(loaded)

    rows = getattr(loaded, "rows", None)
    if callable(rows):
        out.rows_table([c.name for c in loaded.columns], rows(), title="Rows")


@app.command("exists")
def exists(ctx: typer.Context, table: str = typer.Argument(...)):
    """Check whether a table exists (exit code 1 if not)."""
    appctx: CatalogAppContext = ctx.obj
    ident = identifier_or_exit(table)

    try:
        found = appctx.catalog.table_exists(ident)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if not found:
        out.warn(f"Table '{ident}' does not exist.")
        raise typer.Exit(1)
    out.success(f"Table '{ident}' exists.")


@app.command("drop")
def drop(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Namespace holding the tables"),
    name: str | None = NameOpt,
    all_: bool = typer.Option(
        False, "--all", help="Drop all matched tables without selection UI"
    ),
    dry_run: bool = DryRunOpt,
    yes: bool = YesOpt,
):
    """Drop one or more tables in a namespace."""
    appctx: CatalogAppContext = ctx.obj
    ns = namespace_or_exit(namespace)
    compile_regex_or_exit(name, option_name="--name")

    try:
        with out.status("Loading tables..."):
            tables = filter_tables(appctx.catalog.list_tables(ns), name)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if not tables:
        out.warn("No tables found.")
        raise typer.Exit(0)

    by_name = {str(t): t for t in tables}
    out.header("Matched tables")
    out.tables_table(tables, title="Matched tables")

    selected = (
        list(by_name)
        if all_
        else out.select_many("Select tables to drop:", list(by_name))
    )
    if not selected:
        out.warn("No tables selected.")
        raise typer.Exit(0)

    out.info(f"Matched: {len(tables)} | Selected: {len(selected)}")
    if dry_run:
        out.warn("DRY RUN: no changes will be made.")

    if not yes and not dry_run:
        if not out.confirm("Proceed with dropping the selected tables?"):
            out.warn("Cancelled.")
            raise typer.Exit(0)

    with out.status("Dropping tables..." if not dry_run else "Planning table drops..."):
        results = drop_tables(
            appctx.catalog, [by_name[s] for s in selected], dry_run=dry_run
        )

    out.rows_table(
        ["Table", "Dropped", "Error"],
        [(r.table, "yes" if r.dropped else "no", r.error or "") for r in results],
        title="Drop results",
    )

    failed = [r for r in results if r.error]
    if failed:
        out.error(f"Failed to drop {len(failed)} table(s).")
        raise typer.Exit(1)

    if dry_run:
        out.success(f"Dry-run complete: {len(results)} table(s) would be dropped.")
    else:
        out.success(f"Dropped {sum(r.dropped for r in results)} table(s).")
