"""Auth command for checking the marketplace authentication gate."""

import typer

from storegate.cli.services import open_store, require_config
from storegate.core.auth import has_package_refs, requires_auth
from storegate.utils.formatting import print_info, print_warning

app = typer.Typer(
    name="auth",
    help="Show whether marketplace authentication is required.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def auth(ctx: typer.Context) -> None:
    """Show whether marketplace authentication is required.

    Authentication can be skipped when the whitelist is empty or lists
    external apps only.
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config()
    entries = open_store().get()

    if requires_auth(entries, config.authenticated):
        print_warning("Marketplace authentication required.")
    elif config.authenticated and has_package_refs(entries):
        print_info("Marketplace session available.")
    else:
        print_info("No marketplace apps whitelisted. Authentication not required.")
