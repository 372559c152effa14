"""Utility modules for storegate.

This module exports commonly used utility functions.
"""

from storegate.utils.formatting import (
    configure_logging,
    console,
    create_app_table,
    err_console,
    format_app_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "configure_logging",
    "console",
    "create_app_table",
    "err_console",
    "format_app_row",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
