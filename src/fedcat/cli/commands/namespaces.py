"""Commands for browsing and managing namespaces."""

from __future__ import annotations

import typer

from fedcat.cli.common.args import namespace_or_exit
from fedcat.cli.common.context import CatalogAppContext
from fedcat.cli.common.exits import exit_from_exc
from fedcat.cli.common.filter_builder import parse_properties
from fedcat.cli.common.options import CascadeOpt, PropOpt, YesOpt
from fedcat.cli.common.output import out
from fedcat.core.errors import CatalogError

app = typer.Typer(help="Browse and manage namespaces.", no_args_is_help=True)


@app.command("list")
def list_(
    ctx: typer.Context,
    namespace: str | None = typer.Argument(
        None, help="Parent namespace (e.g. datasource.lake); omit for the roots"
    ),
):
    """List child namespaces."""
    appctx: CatalogAppContext = ctx.obj
    parent = namespace_or_exit(namespace) if namespace else None

    try:
        with out.status("Loading namespaces..."):
            children = appctx.catalog.list_namespaces(parent)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if not children:
        out.warn("No namespaces found.")
        raise typer.Exit(0)

    out.header("Namespaces")
    out.namespaces_table(children, title=str(parent) if parent else "Namespaces")


@app.command("exists")
def exists(ctx: typer.Context, namespace: str = typer.Argument(...)):
    """Check whether a namespace exists (exit code 1 if not)."""
    appctx: CatalogAppContext = ctx.obj
    ns = namespace_or_exit(namespace)

    try:
        found = appctx.catalog.namespace_exists(ns)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if not found:
        out.warn(f"Namespace '{ns}' does not exist.")
        raise typer.Exit(1)
    out.success(f"Namespace '{ns}' exists.")


@app.command("create")
def create(
    ctx: typer.Context,
    namespace: str = typer.Argument(...),
    prop: list[str] = PropOpt,
):
    """Create a namespace (in the registry or in the owning backend)."""
    appctx: CatalogAppContext = ctx.obj
    ns = namespace_or_exit(namespace)
    try:
        props = parse_properties(prop)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc

    try:
        appctx.catalog.create_namespace(ns, props)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    out.success(f"Created namespace '{ns}'.")


@app.command("drop")
def drop(
    ctx: typer.Context,
    namespace: str = typer.Argument(...),
    cascade: bool = CascadeOpt,
    yes: bool = YesOpt,
):
    """Drop a namespace."""
    appctx: CatalogAppContext = ctx.obj
    ns = namespace_or_exit(namespace)

    if not yes:
        msg = f"Drop namespace '{ns}'{' and everything below it' if cascade else ''}?"
        if not out.confirm(msg):
            out.warn("Cancelled.")
            raise typer.Exit(0)

    try:
        dropped = appctx.catalog.drop_namespace(ns, cascade=cascade)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if not dropped:
        out.warn(f"Namespace '{ns}' was not dropped.")
        raise typer.Exit(1)
    out.success(f"Dropped namespace '{ns}'.")
