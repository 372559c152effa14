"""Config commands for viewing and changing settings."""

from typing import Annotated

import typer
from rich.table import Table

from storegate.cli.services import require_config
from storegate.core.config import ConfigError, save_config
from storegate.core.paths import get_config_path
from storegate.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="View and change storegate settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    config = require_config()

    table = Table(
        title=f"Configuration ({get_config_path()})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value", style="info")

    for key, value in config.model_dump().items():
        table.add_row(key, str(value))

    console.print(table)


@app.command("set-url")
def set_url(
    url: Annotated[str, typer.Argument(help="New remote whitelist URL.")],
) -> None:
    """Set the remote whitelist URL."""
    if not url.startswith(("http://", "https://")):
        print_error(f"Not an HTTP(S) URL: {url}")
        raise typer.Exit(code=1)

    config = require_config().model_copy(update={"whitelist_url": url})
    try:
        path = save_config(config)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Whitelist URL set to {url} ({path})")
