"""Grouping of whitelist entries into display categories.

Entries without a category land in ``"Other"``. Whenever categories are
displayed, ``"Other"`` sorts last and every other category sorts
alphabetically.
"""

from collections.abc import Iterable, Mapping
from typing import TypeVar

from storegate.models.entry import parse_entry

# Category used for entries that do not name one
DEFAULT_CATEGORY = "Other"

T = TypeVar("T")


def categorize(entries: Iterable[str]) -> dict[str, list[str]]:
    """Group raw entries by category.

    Dropped entries are skipped. Within a category, package names keep the
    iteration order of the input, which carries no meaning for sets.

    A package listed by two raw entries with different categories appears
    once under each of them.

    Args:
        entries: Raw whitelist entries.

    Returns:
        Mapping of category name to package names.
    """
    category_map: dict[str, list[str]] = {}
    for entry in entries:
        parsed = parse_entry(entry)
        if parsed is None:
            continue
        category = parsed.category or DEFAULT_CATEGORY
        category_map.setdefault(category, []).append(parsed.package_name)
    return category_map


def category_sort_key(category: str) -> tuple[bool, str]:
    """Sort key placing the default category after all others."""
    return (category == DEFAULT_CATEGORY, category)


def sort_categories(categories: Mapping[str, T]) -> dict[str, T]:
    """Return a copy of a category mapping in display order.

    Example:
        >>> list(sort_categories({"Games": 1, "Other": 2, "Apps": 3}))
        ['Apps', 'Games', 'Other']
    """
    return {name: categories[name] for name in sorted(categories, key=category_sort_key)}


def find_categories(category_map: Mapping[str, list[str]], package_name: str) -> list[str]:
    """Find every category a package is listed under.

    Args:
        category_map: Mapping produced by categorize().
        package_name: Package to look up.

    Returns:
        Category names in display order, [DEFAULT_CATEGORY] if the
        package is not listed anywhere.
    """
    found = [
        name
        for name in sorted(category_map, key=category_sort_key)
        if package_name in category_map[name]
    ]
    return found or [DEFAULT_CATEGORY]
