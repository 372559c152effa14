"""Sync command for fetching the remote whitelist once.

This module provides the `storegate sync` command, which runs a single
fetch/compare/replace cycle and reports what changed.
"""

import typer

from storegate.cli.display import print_change
from storegate.cli.services import create_fetcher, open_store, require_config
from storegate.core.events import EventBus
from storegate.core.sync import SyncOutcome, WhitelistSync
from storegate.utils.formatting import print_error, print_info, print_success

app = typer.Typer(
    name="sync",
    help="Fetch the remote whitelist once.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def sync(ctx: typer.Context) -> None:
    """Fetch the remote whitelist and update the local copy.

    The local whitelist is only replaced when the remote entry set differs
    from it. Order and duplicates in the remote list are ignored.

    Examples:
        storegate sync
        STOREGATE_WHITELIST_URL=https://host/list.json storegate sync
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config()
    store = open_store()
    bus = EventBus()
    bus.subscribe(print_change)

    with create_fetcher(config) as fetcher:
        outcome = WhitelistSync(
            fetcher, store, bus, interval=config.sync_interval_seconds
        ).sync_once()

    if outcome == SyncOutcome.FAILED:
        print_error(f"Failed to fetch whitelist from {config.whitelist_url}")
        raise typer.Exit(code=1)

    entry_count = len(store.get())
    if outcome == SyncOutcome.CHANGED:
        print_success(f"Whitelist updated ({entry_count} entries).")
    else:
        print_info(f"Whitelist is up to date ({entry_count} entries).")
