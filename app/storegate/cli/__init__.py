"""CLI package for storegate.

This package contains the Typer application and all subcommands.
"""

from storegate.cli.main import app

__all__ = ["app"]
