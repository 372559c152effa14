"""Unit tests for the main CLI application."""

from storegate import __version__
from storegate.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for the storegate entry point."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"storegate version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("sync", "watch", "apps", "auth", "whitelist", "config"):
            assert command in result.stdout
