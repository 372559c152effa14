"""Watch command for continuous whitelist synchronization.

This module provides the `storegate watch` command, which keeps the
local whitelist in sync until interrupted.
"""

import threading
from typing import Annotated

import typer

from storegate.cli.display import print_change
from storegate.cli.services import create_fetcher, open_store, require_config
from storegate.core.events import EventBus
from storegate.core.sync import WhitelistSync
from storegate.utils.formatting import print_error, print_info

app = typer.Typer(
    name="watch",
    help="Keep the whitelist in sync until interrupted.",
    invoke_without_command=True,
)


def _wait_forever() -> None:
    threading.Event().wait()


@app.callback(invoke_without_command=True)
def watch(
    ctx: typer.Context,
    interval: Annotated[
        float | None,
        typer.Option(
            "--interval",
            "-i",
            min=1.0,
            help="Seconds between syncs (default: from config).",
        ),
    ] = None,
) -> None:
    """Sync immediately, then at a fixed interval.

    Failed fetches are retried on the next tick. Changes are printed as
    they are detected. Press Ctrl+C to stop.

    Examples:
        storegate watch
        storegate watch --interval 60
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config()
    store = open_store()
    bus = EventBus()
    bus.subscribe(print_change)

    period = interval or config.sync_interval_seconds
    print_info(f"Watching {config.whitelist_url} every {period:g}s (Ctrl+C to stop)")

    with create_fetcher(config) as fetcher:
        try:
            with WhitelistSync(fetcher, store, bus, interval=period):
                _wait_forever()
        except KeyboardInterrupt:
            print_info("Stopped.")
        except RuntimeError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
