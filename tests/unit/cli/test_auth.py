"""Unit tests for auth command."""

import json
from pathlib import Path

from storegate.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


def seed(path: Path, entries: set[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(sorted(entries)))


class TestAuthCommand:
    """Tests for storegate auth command."""

    def test_empty_whitelist(self) -> None:
        result = runner.invoke(app, ["auth"])
        assert result.exit_code == 0
        assert "Authentication not required." in result.stdout

    def test_external_only(self, state_whitelist_path: Path, external_entries: set[str]) -> None:
        seed(state_whitelist_path, external_entries)

        result = runner.invoke(app, ["auth"])

        assert "Authentication not required." in result.stdout

    def test_marketplace_apps_need_auth(
        self, state_whitelist_path: Path, mixed_entries: set[str]
    ) -> None:
        seed(state_whitelist_path, mixed_entries)

        result = runner.invoke(app, ["auth"])

        assert result.exit_code == 0
        assert "authentication required" in result.output

    def test_session_available(
        self, tmp_path: Path, state_whitelist_path: Path, mixed_entries: set[str]
    ) -> None:
        seed(state_whitelist_path, mixed_entries)
        config_path = tmp_path / "config" / "storegate" / "config.toml"
        config_path.parent.mkdir(parents=True)
        config_path.write_text("authenticated = true\n")

        result = runner.invoke(app, ["auth"])

        assert "session available" in result.stdout

    def test_dropped_package_ref_needs_no_session(self, state_whitelist_path: Path) -> None:
        """An unparseable entry neither requires nor implies a marketplace session."""
        seed(state_whitelist_path, {" Games"})

        result = runner.invoke(app, ["auth"])

        assert result.exit_code == 0
        assert "Authentication not required." in result.stdout
        assert "session available" not in result.stdout
