"""Apps command for showing resolved whitelisted apps.

This module provides the `storegate apps` command, which resolves the
local whitelist into categorized apps.
"""

import json
from typing import Annotated

import typer

from storegate.cli.display import print_resolution
from storegate.cli.services import open_store, require_config
from storegate.core.resolver import AppResolver, ResolutionResult, filter_categories
from storegate.models.app import ResolvedApp
from storegate.utils.formatting import console, print_info, print_warning

app = typer.Typer(
    name="apps",
    help="Show whitelisted apps by category.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def apps(
    ctx: typer.Context,
    query: Annotated[
        str,
        typer.Option(
            "--query",
            "-q",
            help="Only show apps whose name or package contains this text.",
        ),
    ] = "",
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
    no_size: Annotated[
        bool,
        typer.Option(
            "--no-size",
            help="Skip probing download sizes of external apps.",
        ),
    ] = False,
) -> None:
    """Resolve the whitelist into apps grouped by category.

    Marketplace apps are withheld while no marketplace session is
    configured; external apps are always shown.

    Examples:
        storegate apps
        storegate apps -q maps
        storegate apps --json
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config()
    entries = open_store().get()

    if not entries:
        print_info("No apps whitelisted.")
        return

    with AppResolver(
        placeholder_icon=config.placeholder_icon,
        probe_sizes=not no_size,
        timeout=config.request_timeout_seconds,
    ) as resolver:
        result = resolver.resolve(entries, is_authenticated=config.authenticated)

    categories = filter_categories(result.categories, query)

    if json_output:
        _print_json(result, categories)
        return

    if result.requires_auth:
        print_warning("Marketplace authentication required. Marketplace apps are hidden.")

    if not categories:
        if query:
            print_info(f"No apps match '{query}'.")
        else:
            print_info("No apps could be resolved.")
        return

    print_resolution(ResolutionResult(categories=categories, requires_auth=result.requires_auth))


def _print_json(result: ResolutionResult, categories: dict[str, list[ResolvedApp]]) -> None:
    output = {
        "requires_auth": result.requires_auth,
        "categories": {
            name: [app.to_dict() for app in apps] for name, apps in categories.items()
        },
    }
    console.print_json(json.dumps(output))
