"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories and the legacy whitelist into tmp_path."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.delenv("STOREGATE_WHITELIST_URL", raising=False)
    monkeypatch.setattr(
        "storegate.cli.services.LEGACY_WHITELIST_PATH", tmp_path / "legacy" / "whitelist.json"
    )
    return tmp_path


@pytest.fixture
def state_whitelist_path(tmp_path: Path) -> Path:
    """Location of the persisted whitelist under the isolated state dir."""
    return tmp_path / "state" / "storegate" / "whitelist.json"


@pytest.fixture
def mixed_entries() -> set[str]:
    """Whitelist with marketplace, categorized and external entries."""
    return {
        "org.mozilla.firefox",
        "com.spotify.music Media",
        "org.videolan.vlc Media",
        "Uber|com.uber.app|1.2.3|https://x/u.apk|https://x/i.png|Transport",
        "Signal|org.thoughtcrime.securesms|6.40.2|https://x/signal.apk",
    }


@pytest.fixture
def external_entries() -> set[str]:
    """Whitelist made of external apps only."""
    return {
        "Uber|com.uber.app|1.2.3|https://x/u.apk|https://x/i.png|Transport",
        "Signal|org.thoughtcrime.securesms|6.40.2|https://x/signal.apk",
    }
