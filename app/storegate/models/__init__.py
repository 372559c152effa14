"""Data models for storegate.

This module exports the core data structures used throughout the application.
"""

from storegate.models.app import AppSource, MarketplaceApp, ResolvedApp
from storegate.models.entry import (
    ExternalApp,
    PackageRef,
    ParsedEntry,
    extract_package_name,
    is_external_entry,
    parse_entries,
    parse_entry,
    parse_version_code,
)

__all__ = [
    "AppSource",
    "ExternalApp",
    "MarketplaceApp",
    "PackageRef",
    "ParsedEntry",
    "ResolvedApp",
    "extract_package_name",
    "is_external_entry",
    "parse_entries",
    "parse_entry",
    "parse_version_code",
]
