"""Shared wiring for CLI commands.

Builds the engine components from the user's configuration and turns
configuration errors into user-friendly exits.
"""

import typer

from storegate.core.config import ConfigError, StoregateConfig, load_config
from storegate.core.fetcher import RemoteFetcher
from storegate.core.paths import LEGACY_WHITELIST_PATH
from storegate.core.store import StoreError, WhitelistStore, migrate_legacy_whitelist
from storegate.utils.formatting import print_error, print_warning


def require_config() -> StoregateConfig:
    """Load configuration or exit with a helpful error message.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e


def open_store() -> WhitelistStore:
    """Open the persisted whitelist, adopting a legacy whitelist on first use."""
    store = WhitelistStore()
    try:
        migrate_legacy_whitelist(store, LEGACY_WHITELIST_PATH)
    except StoreError as e:
        print_warning(f"Could not migrate legacy whitelist: {e}")
    return store


def create_fetcher(config: StoregateConfig) -> RemoteFetcher:
    """Create a fetcher for the configured whitelist URL."""
    return RemoteFetcher(config.whitelist_url, timeout=config.request_timeout_seconds)
