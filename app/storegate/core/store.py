"""Persisted whitelist storage.

This module provides the WhitelistStore class holding the current raw
entry set. The set is persisted as a JSON array of strings and is only
ever replaced as a whole.
"""

import json
import logging
import os
import threading
from collections.abc import Iterable
from pathlib import Path
from tempfile import NamedTemporaryFile

from storegate.core.categorizer import categorize
from storegate.core.paths import get_whitelist_path
from storegate.models.entry import (
    ExternalApp,
    extract_package_name,
    is_external_entry,
    parse_entry,
)

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the whitelist cannot be persisted."""


def read_whitelist_file(path: Path) -> frozenset[str] | None:
    """Read a persisted whitelist.

    Args:
        path: JSON file holding an array of entry strings.

    Returns:
        The entries, an empty set for an empty file, or None when the file
        is missing or corrupt.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Failed to read whitelist %s: %s", path, e)
        return None

    if not raw.strip():
        return frozenset()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring corrupt whitelist %s: %s", path, e)
        return None

    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        logger.warning("Ignoring whitelist %s: expected a JSON array of strings", path)
        return None

    return frozenset(data)


class WhitelistStore:
    """Thread-safe holder of the current whitelist.

    Storage location: ~/.local/state/storegate/whitelist.json

    The in-memory value is loaded lazily on first access. A missing, empty
    or corrupt file yields an empty whitelist. Every read returns a copy,
    so callers iterating a snapshot are unaffected by a concurrent replace.

    Lifecycle: created at startup, written only through replace(), and
    dropped with the process. No shutdown step is needed since every
    replace is persisted before it returns.

    Attributes:
        path: Location of the persisted JSON file.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize WhitelistStore.

        Args:
            path: Optional override for the persisted file.
                  Default: ~/.local/state/storegate/whitelist.json
        """
        self._path = path if path is not None else get_whitelist_path()
        self._lock = threading.Lock()
        self._entries: frozenset[str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_persisted(self) -> bool:
        """Check whether a whitelist file exists on disk."""
        return self._path.exists()

    def _snapshot(self) -> frozenset[str]:
        with self._lock:
            if self._entries is None:
                loaded = read_whitelist_file(self._path)
                self._entries = loaded if loaded is not None else frozenset()
                logger.debug("Loaded %d whitelist entries from %s", len(self._entries), self._path)
            return self._entries

    def get(self) -> set[str]:
        """Return a copy of the current entries."""
        return set(self._snapshot())

    def replace(self, entries: Iterable[str]) -> None:
        """Replace the whole entry set and persist it.

        The in-memory value is swapped first, so readers see the new set
        even if writing the file fails.

        Args:
            entries: New raw entries.

        Raises:
            StoreError: If the file cannot be written.
        """
        new_entries = frozenset(entries)
        with self._lock:
            self._entries = new_entries
            self._write(new_entries)

    def _write(self, entries: frozenset[str]) -> None:
        """Write entries atomically via a temporary file and os.replace()."""
        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(sorted(entries), f)
            os.replace(str(tmp_path), str(self._path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            logger.warning("Failed to persist whitelist to %s: %s", self._path, e)
            raise StoreError(f"Failed to write whitelist: {e}") from e

    # =========================================================================
    # Derived queries
    # =========================================================================

    def has_only_external_apps(self) -> bool:
        """Check whether marketplace authentication can be skipped.

        Returns:
            True if the whitelist is empty or every entry is in the
            external app format.
        """
        return all(is_external_entry(entry) for entry in self._snapshot())

    def package_names(self) -> set[str]:
        """Get the package names of all parseable entries."""
        names: set[str] = set()
        for entry in self._snapshot():
            name = extract_package_name(entry)
            if name is not None:
                names.add(name)
        return names

    def is_whitelisted(self, package_name: str) -> bool:
        """Check if a package is named by any entry."""
        return package_name in self.package_names()

    def external_apps(self) -> list[ExternalApp]:
        """Get all parseable external app descriptors."""
        apps: list[ExternalApp] = []
        for entry in self._snapshot():
            parsed = parse_entry(entry)
            if isinstance(parsed, ExternalApp):
                apps.append(parsed)
        return apps

    def get_external_app(self, package_name: str) -> ExternalApp | None:
        """Find the external app descriptor for a package."""
        for app in self.external_apps():
            if app.package_name == package_name:
                return app
        return None

    def by_category(self) -> dict[str, list[str]]:
        """Group current entries by category."""
        return categorize(self._snapshot())


def migrate_legacy_whitelist(store: WhitelistStore, legacy_path: Path) -> bool:
    """Adopt a legacy system-wide whitelist as the initial persisted state.

    Runs once at startup. Nothing happens if the store already has a
    persisted file or the legacy file is missing or corrupt.

    Args:
        store: Store to seed.
        legacy_path: Location of the legacy JSON whitelist.

    Returns:
        True if the legacy whitelist was adopted.
    """
    if store.is_persisted:
        return False

    legacy_entries = read_whitelist_file(legacy_path)
    if not legacy_entries:
        return False

    store.replace(legacy_entries)
    logger.info("Migrated %d entries from legacy whitelist %s", len(legacy_entries), legacy_path)
    return True
