"""Unit tests for sync command.

Tests for the CLI sync command implementation.
"""

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import httpx
from storegate.cli.main import app
from storegate.core.fetcher import RemoteFetcher
from typer.testing import CliRunner

runner = CliRunner()


def make_fetcher(handler: Callable[[httpx.Request], httpx.Response]) -> RemoteFetcher:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return RemoteFetcher("https://example.com/whitelist.json", client=client)


def serve(entries: list[str]) -> RemoteFetcher:
    return make_fetcher(lambda request: httpx.Response(200, json=entries))


class TestSyncCommand:
    """Tests for storegate sync command."""

    def test_sync_help(self) -> None:
        result = runner.invoke(app, ["sync", "--help"])
        assert result.exit_code == 0
        assert "Fetch the remote whitelist" in result.stdout

    def test_sync_stores_new_entries(self, state_whitelist_path: Path) -> None:
        """First sync persists the fetched whitelist and reports the change."""
        fetcher = serve(["org.mozilla.firefox", "com.spotify.music Media"])

        with patch("storegate.cli.commands.sync.create_fetcher", return_value=fetcher):
            result = runner.invoke(app, ["sync"])

        assert result.exit_code == 0
        assert "Whitelist updated (2 entries)" in result.stdout
        assert "2 added" in result.stdout
        assert set(json.loads(state_whitelist_path.read_text())) == {
            "org.mozilla.firefox",
            "com.spotify.music Media",
        }

    def test_sync_unchanged(self, state_whitelist_path: Path) -> None:
        """Same entries in a different order are not a change."""
        state_whitelist_path.parent.mkdir(parents=True)
        state_whitelist_path.write_text(json.dumps(["b", "a"]))
        fetcher = serve(["a", "b", "a"])

        with patch("storegate.cli.commands.sync.create_fetcher", return_value=fetcher):
            result = runner.invoke(app, ["sync"])

        assert result.exit_code == 0
        assert "up to date (2 entries)" in result.stdout
        assert "Whitelist Changes" not in result.stdout

    def test_sync_failure_keeps_store(self, state_whitelist_path: Path) -> None:
        """A failed fetch exits with code 1 and leaves the whitelist alone."""
        state_whitelist_path.parent.mkdir(parents=True)
        state_whitelist_path.write_text(json.dumps(["a"]))
        fetcher = make_fetcher(lambda request: httpx.Response(503))

        with patch("storegate.cli.commands.sync.create_fetcher", return_value=fetcher):
            result = runner.invoke(app, ["sync"])

        assert result.exit_code == 1
        assert "Failed to fetch" in result.output
        assert json.loads(state_whitelist_path.read_text()) == ["a"]

    def test_sync_invalid_config(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config" / "storegate" / "config.toml"
        config_path.parent.mkdir(parents=True)
        config_path.write_text("whitelist_url = ")

        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 1
        assert "Failed to load config" in result.output

    def test_sync_config_version_below_one(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config" / "storegate" / "config.toml"
        config_path.parent.mkdir(parents=True)
        config_path.write_text("schema_version = 0\n")

        result = runner.invoke(app, ["sync"])

        assert result.exit_code == 1
        assert "Failed to load config" in result.output
