"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from storegate import __version__
from storegate.cli.commands import apps, auth, config, sync, watch, whitelist
from storegate.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="storegate",
    help="Remote app whitelist synchronization and resolution.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"storegate version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """storegate - gate which apps a device may see and install.

    Keeps a local copy of a remotely published whitelist in sync and
    resolves it into categorized marketplace and external apps.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.add_typer(sync.app, name="sync")
app.add_typer(watch.app, name="watch")
app.add_typer(apps.app, name="apps")
app.add_typer(auth.app, name="auth")
app.add_typer(whitelist.app, name="whitelist")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
