"""CLI commands for storegate.

This package contains all subcommand implementations.
"""

from storegate.cli.commands import apps, auth, config, sync, watch, whitelist

__all__ = ["apps", "auth", "config", "sync", "watch", "whitelist"]
