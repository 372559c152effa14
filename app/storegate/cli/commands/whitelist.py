"""Whitelist inspection commands.

Provides commands to list the stored entries by category, check a single
package, and export the whitelist as JSON.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from storegate.cli.display import create_categories_table
from storegate.cli.services import open_store
from storegate.core.categorizer import sort_categories
from storegate.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Inspect the local whitelist.",
    no_args_is_help=True,
)


@app.command("list")
def list_entries(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """List whitelisted packages grouped by category."""
    categories = sort_categories(open_store().by_category())

    if json_output:
        console.print_json(json.dumps(categories))
        return

    if not categories:
        print_info("No apps whitelisted.")
        return

    console.print(create_categories_table(categories))


@app.command()
def check(
    package: Annotated[str, typer.Argument(help="Package name to check.")],
) -> None:
    """Check whether a package is whitelisted (exit code 1 if not)."""
    if open_store().is_whitelisted(package):
        print_success(f"{package} is whitelisted.")
        return

    print_info(f"{package} is not whitelisted.")
    raise typer.Exit(code=1)


@app.command()
def export(
    path: Annotated[Path, typer.Argument(help="Destination JSON file.")],
) -> None:
    """Export the whitelist as a JSON array of entries."""
    entries = sorted(open_store().get())
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(entries, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        print_error(f"Failed to export whitelist: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Exported {len(entries)} entries to {path}")
