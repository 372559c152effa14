"""storegate configuration and settings.

This module provides the configuration model and I/O functions.
Configuration is stored in ~/.config/storegate/config.toml and migrated
to the current schema version when it is loaded.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from storegate.core.paths import get_config_path
from storegate.core.sync import DEFAULT_SYNC_INTERVAL

logger = logging.getLogger(__name__)

# Current configuration schema version
CONFIG_SCHEMA_VERSION = 2

# Remote whitelist served through the GitHub contents API
DEFAULT_WHITELIST_URL = "https://api.github.com/repos/storegate/whitelist/contents/whitelist.json"

# Environment variable overriding the configured whitelist URL
WHITELIST_URL_ENV = "STOREGATE_WHITELIST_URL"


class StoregateConfig(BaseModel):
    """Configuration for whitelist synchronization and resolution.

    Attributes:
        schema_version: Configuration schema version.
        whitelist_url: URL serving the remote whitelist.
        sync_interval_seconds: Seconds between two sync cycles.
        request_timeout_seconds: Timeout for remote requests.
        placeholder_icon: Icon reference used when no icon can be resolved.
        authenticated: Whether a marketplace session is available.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: Annotated[
        int,
        Field(description="Configuration schema version"),
    ] = CONFIG_SCHEMA_VERSION
    whitelist_url: Annotated[
        str,
        Field(min_length=1, description="Remote whitelist URL"),
    ] = DEFAULT_WHITELIST_URL
    sync_interval_seconds: Annotated[
        float,
        Field(ge=1, le=86400, description="Seconds between sync cycles (1-86400)"),
    ] = DEFAULT_SYNC_INTERVAL
    request_timeout_seconds: Annotated[
        float,
        Field(ge=1, le=300, description="Request timeout in seconds (1-300)"),
    ] = 10.0
    placeholder_icon: Annotated[
        str,
        Field(description="Icon reference used as last resort"),
    ] = "placeholder"
    authenticated: Annotated[
        bool,
        Field(description="Marketplace session available"),
    ] = False


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def _migrate_v1(data: dict[str, Any]) -> dict[str, Any]:
    """v1 -> v2: rename remote_url and interval."""
    renames = {"remote_url": "whitelist_url", "interval": "sync_interval_seconds"}
    for old_key, new_key in renames.items():
        if old_key in data:
            logger.warning("Deprecated '%s' in config. Migrating to '%s'.", old_key, new_key)
            value = data.pop(old_key)
            data.setdefault(new_key, value)
    return data


# Migration steps keyed by the version they upgrade from
_MIGRATIONS = {1: _migrate_v1}


def migrate_config(data: dict[str, Any]) -> dict[str, Any]:
    """Upgrade raw config data to the current schema version.

    Data without a schema_version is treated as version 1.

    Args:
        data: Raw data read from the TOML file.

    Returns:
        A migrated copy of the data.

    Raises:
        ConfigError: If the version is below 1 or newer than this release
            understands.
    """
    migrated = dict(data)
    version = migrated.get("schema_version", 1)
    if not isinstance(version, int) or not 1 <= version <= CONFIG_SCHEMA_VERSION:
        raise ConfigError(f"Unsupported config schema version: {version}")

    while version < CONFIG_SCHEMA_VERSION:
        migrated = _MIGRATIONS[version](migrated)
        version += 1

    migrated["schema_version"] = CONFIG_SCHEMA_VERSION
    return migrated


def load_config(path: Path | None = None) -> StoregateConfig:
    """Load configuration from a TOML file.

    A missing file yields the defaults. The STOREGATE_WHITELIST_URL
    environment variable overrides the configured URL.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated StoregateConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config: {e}") from e
        data = migrate_config(data)

    env_url = os.environ.get(WHITELIST_URL_ENV)
    if env_url:
        data["whitelist_url"] = env_url

    try:
        return StoregateConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: StoregateConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The StoregateConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json")

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
