"""Unit tests for configuration loading, saving and migration."""

import tomllib
from pathlib import Path

import pytest
from storegate.core.config import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_WHITELIST_URL,
    ConfigError,
    ConfigParseError,
    StoregateConfig,
    load_config,
    migrate_config,
    save_config,
)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_yields_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "missing.toml")

        assert config == StoregateConfig()
        assert config.whitelist_url == DEFAULT_WHITELIST_URL
        assert config.sync_interval_seconds == 15.0

    def test_loads_values(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            'schema_version = 2\nwhitelist_url = "https://host/list.json"\n'
            "sync_interval_seconds = 30\nauthenticated = true\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.whitelist_url == "https://host/list.json"
        assert config.sync_interval_seconds == 30
        assert config.authenticated is True

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("whitelist_url = ", encoding="utf-8")

        with pytest.raises(ConfigParseError, match="Invalid TOML"):
            load_config(path)

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("schema_version = 2\ncolour = 'red'\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid config content"):
            load_config(path)

    def test_interval_out_of_range(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("schema_version = 2\nsync_interval_seconds = 0\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_env_overrides_url(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOREGATE_WHITELIST_URL", "https://env/list.json")

        assert load_config(tmp_path / "missing.toml").whitelist_url == "https://env/list.json"

    def test_default_path(self, tmp_path: Path) -> None:
        """Without a path the XDG config location is used."""
        path = tmp_path / "config" / "storegate" / "config.toml"
        path.parent.mkdir(parents=True)
        path.write_text('whitelist_url = "https://xdg/list.json"\n', encoding="utf-8")

        assert load_config().whitelist_url == "https://xdg/list.json"


class TestMigrateConfig:
    """Tests for migrate_config function."""

    def test_v1_keys_renamed(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="storegate.core.config"):
            result = migrate_config({"remote_url": "https://old/list.json", "interval": 60})

        assert result == {
            "whitelist_url": "https://old/list.json",
            "sync_interval_seconds": 60,
            "schema_version": CONFIG_SCHEMA_VERSION,
        }
        assert "remote_url" in caplog.text

    def test_new_key_wins_over_deprecated(self) -> None:
        result = migrate_config({"remote_url": "https://old", "whitelist_url": "https://new"})

        assert result["whitelist_url"] == "https://new"

    def test_current_version_untouched(self) -> None:
        data = {"schema_version": CONFIG_SCHEMA_VERSION, "authenticated": True}

        assert migrate_config(data) == data

    def test_input_not_mutated(self) -> None:
        data = {"remote_url": "https://old"}
        migrate_config(data)
        assert data == {"remote_url": "https://old"}

    def test_future_version_rejected(self) -> None:
        with pytest.raises(ConfigError, match="Unsupported"):
            migrate_config({"schema_version": CONFIG_SCHEMA_VERSION + 1})

    @pytest.mark.parametrize("version", [0, -1])
    def test_version_below_one_rejected(self, version: int) -> None:
        with pytest.raises(ConfigError, match="Unsupported"):
            migrate_config({"schema_version": version})

    def test_load_rejects_zero_version(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("schema_version = 0\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_load_migrates_v1_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('remote_url = "https://old/list.json"\n', encoding="utf-8")

        assert load_config(path).whitelist_url == "https://old/list.json"


class TestSaveConfig:
    """Tests for save_config function."""

    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.toml"
        config = StoregateConfig(whitelist_url="https://host/list.json", authenticated=True)

        saved = save_config(config, path)

        assert saved == path
        assert load_config(path) == config

    def test_writes_schema_version(self, tmp_path: Path) -> None:
        path = save_config(StoregateConfig(), tmp_path / "config.toml")

        with open(path, "rb") as f:
            assert tomllib.load(f)["schema_version"] == CONFIG_SCHEMA_VERSION
