"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from storegate.core.theme import get_theme
from storegate.models.app import ResolvedApp


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich on stderr.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def create_app_table(title: str) -> Table:
    """Create a pre-configured table for displaying resolved apps.

    Args:
        title: Table title, usually the category name.

    Returns:
        Rich Table configured for app display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    table.add_column("App", no_wrap=True)
    table.add_column("Package", style="muted")
    table.add_column("Version", style="muted")
    table.add_column("Size", style="info", justify="right")
    table.add_column("Status")
    return table


def format_app_row(app: ResolvedApp) -> tuple[str, str, str, str, str, str]:
    """Format a resolved app as a table row.

    External apps are marked with a hollow diamond, marketplace apps with
    a filled one.

    Returns:
        Tuple of (icon, name, package, version, size, status) with Rich markup.
    """
    if app.is_external:
        icon = "[app_external]◇[/]"
        name = f"[app_external]{app.display_name}[/]"
    else:
        icon = "[app_marketplace]◆[/]"
        name = f"[app_marketplace]{app.display_name}[/]"

    if app.has_update:
        status = "[warning]update available[/]"
    elif app.is_installed:
        status = "[success]installed[/]"
    else:
        status = "[muted]-[/]"

    return (icon, name, app.package_name, app.version_name or "-", app.size_human, status)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
