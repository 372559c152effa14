"""Unit tests for watch command."""

from unittest.mock import patch

import httpx
import pytest
from storegate.cli.main import app
from storegate.core.fetcher import RemoteFetcher
from typer.testing import CliRunner

runner = CliRunner()


def _fetcher() -> RemoteFetcher:
    client = httpx.Client(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=["a"]))
    )
    return RemoteFetcher("https://example.com/whitelist.json", client=client)


class TestWatchCommand:
    """Tests for storegate watch command."""

    @pytest.fixture(autouse=True)
    def short_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREGATE_WHITELIST_URL", "https://h/w.json")

    def test_watch_stops_on_interrupt(self) -> None:
        with (
            patch("storegate.cli.commands.watch.create_fetcher", return_value=_fetcher()),
            patch(
                "storegate.cli.commands.watch._wait_forever", side_effect=KeyboardInterrupt
            ),
        ):
            result = runner.invoke(app, ["watch", "--interval", "30"])

        assert result.exit_code == 0
        assert "every 30s" in result.stdout
        assert "Stopped." in result.stdout

    def test_watch_uses_config_interval(self) -> None:
        with (
            patch("storegate.cli.commands.watch.create_fetcher", return_value=_fetcher()),
            patch(
                "storegate.cli.commands.watch._wait_forever", side_effect=KeyboardInterrupt
            ),
        ):
            result = runner.invoke(app, ["watch"])

        assert result.exit_code == 0
        assert "every 15s" in result.stdout

    def test_watch_rejects_small_interval(self) -> None:
        result = runner.invoke(app, ["watch", "--interval", "0.5"])
        assert result.exit_code != 0
