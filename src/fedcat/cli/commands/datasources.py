"""Commands for registering datasources."""

from __future__ import annotations

import typer

from fedcat.cli.common.args import namespace_or_exit
from fedcat.cli.common.context import CatalogAppContext
from fedcat.cli.common.exits import exit_from_exc
from fedcat.cli.common.filter_builder import parse_properties
from fedcat.cli.common.options import PropOpt, YesOpt
from fedcat.cli.common.output import out
from fedcat.core.errors import CatalogError
from fedcat.core.models import DatasourceDefinition, DatasourceKind

app = typer.Typer(help="Register and remove datasources.", no_args_is_help=True)


@app.command("list")
def list_(ctx: typer.Context):
    """List registered datasources."""
    appctx: CatalogAppContext = ctx.obj

    try:
        datasources = appctx.registry.list_datasources()
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if not datasources:
        out.warn("No datasources registered.")
        raise typer.Exit(0)

    out.header("Datasources")
    out.info(f"Registry: {appctx.registry_path} | Datasources: {len(datasources)}")
    out.datasources_table(datasources)


@app.command("register")
def register(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Owner namespace, e.g. datasource"),
    name: str = typer.Argument(..., help="Datasource name"),
    kind: str = typer.Option(
        ...,
        "--kind",
        "-k",
        help=f"Backend kind ({', '.join(k.value for k in DatasourceKind)})",
    ),
    prop: list[str] = PropOpt,
):
    """Register a datasource under a namespace."""
    appctx: CatalogAppContext = ctx.obj
    owner = namespace_or_exit(namespace)
    try:
        props = parse_properties(prop)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc

    try:
        definition = DatasourceDefinition(
            namespace=owner,
            name=name,
            kind=DatasourceKind.parse(kind),
            properties=props,
        )
        appctx.registry.register_datasource(definition)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    out.success(f"Registered {definition.kind.value} datasource '{definition.full_namespace}'.")


@app.command("remove")
def remove(
    ctx: typer.Context,
    namespace: str = typer.Argument(..., help="Owner namespace"),
    name: str = typer.Argument(..., help="Datasource name"),
    yes: bool = YesOpt,
):
    """Remove a datasource registration (backend data is left untouched)."""
    appctx: CatalogAppContext = ctx.obj
    owner = namespace_or_exit(namespace)

    if not yes and not out.confirm(f"Remove datasource '{owner}.{name}'?"):
        out.warn("Cancelled.")
        raise typer.Exit(0)

    try:
        removed = appctx.registry.unregister_datasource(owner, name)
    except CatalogError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if not removed:
        out.warn(f"Datasource '{owner}.{name}' is not registered.")
        raise typer.Exit(1)
    out.success(f"Removed datasource '{owner}.{name}'.")
