"""Marketplace authentication gate.

Only package references need the marketplace. A whitelist that is empty
or made entirely of external apps can be browsed without signing in.
"""

from collections.abc import Iterable

from storegate.models.entry import PackageRef, parse_entry


def has_package_refs(entries: Iterable[str]) -> bool:
    """Check if any entry parses as a marketplace package reference."""
    return any(isinstance(parse_entry(entry), PackageRef) for entry in entries)


def requires_auth(entries: Iterable[str], is_authenticated: bool) -> bool:
    """Decide whether marketplace authentication is required.

    Args:
        entries: Raw whitelist entries.
        is_authenticated: Whether a marketplace session exists.

    Returns:
        True if at least one package reference is whitelisted and there is
        no marketplace session.
    """
    if is_authenticated:
        return False
    return has_package_refs(entries)
