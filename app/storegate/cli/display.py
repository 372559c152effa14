"""Shared Rich display functions for whitelist changes and apps.

Provides reusable table builders used by the sync, watch, apps and
whitelist commands.
"""

from rich.table import Table

from storegate.core.events import WhitelistChanged
from storegate.core.resolver import ResolutionResult
from storegate.utils.formatting import console, create_app_table, format_app_row


def create_changes_table(event: WhitelistChanged) -> Table:
    """Create a Rich table listing added and removed entries.

    Args:
        event: The change notification to display.

    Returns:
        Rich Table with one row per added or removed entry.
    """
    table = Table(
        title="Whitelist Changes",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Change", width=8, justify="center")
    table.add_column("Entry")

    for entry in sorted(event.added):
        table.add_row("[added]+added[/added]", f"[added]{entry}[/added]")
    for entry in sorted(event.removed):
        table.add_row("[removed]-removed[/removed]", f"[removed]{entry}[/removed]")

    return table


def print_change(event: WhitelistChanged) -> None:
    """Print a change notification with a summary line."""
    console.print(create_changes_table(event))
    console.print(
        f"\nSummary: [added]{len(event.added)} added[/added], "
        f"[removed]{len(event.removed)} removed[/removed], "
        f"{len(event.entries)} entries total"
    )


def create_categories_table(categories: dict[str, list[str]]) -> Table:
    """Create a Rich table of package names grouped by category.

    Args:
        categories: Category name to package names, in display order.

    Returns:
        Rich Table with one row per category.
    """
    table = Table(
        title="Whitelist",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Category", no_wrap=True)
    table.add_column("Count", justify="right", style="info")
    table.add_column("Packages", style="muted")

    for name, packages in categories.items():
        table.add_row(name, str(len(packages)), ", ".join(sorted(packages)))

    return table


def print_resolution(result: ResolutionResult) -> None:
    """Print one app table per category."""
    for name, apps in result.categories.items():
        table = create_app_table(name)
        for app in apps:
            table.add_row(*format_app_row(app))
        console.print(table)
