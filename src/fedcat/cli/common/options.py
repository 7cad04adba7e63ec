"""Common CLI options for the CLI."""

import typer

RegistryOpt = typer.Option(
    None,
    "--registry",
    "-r",
    help="Registry file (defaults to $FEDCAT_REGISTRY or ~/.config/fedcat/registry.json)",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log catalog resolution and scan details",
)

PropOpt = typer.Option(
    [],
    "--prop",
    help="Property (key=value). This is reusable.",
    show_default=False,
)

NameOpt = typer.Option(
    None,
    "--name",
    help="Regex filter on table names",
)

CascadeOpt = typer.Option(
    False,
    "--cascade",
    help="Drop everything below the namespace as well",
)

YesOpt = typer.Option(False, "--yes", help="Skip confirmation prompt")

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show what would be dropped, but don't drop anything",
)

ParallelOpt = typer.Option(
    None,
    "--parallel",
    "-n",
    min=1,
    help="Number of files scanned in parallel (defaults to $FEDCAT_SCAN_PARALLEL)",
)
