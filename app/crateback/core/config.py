"""User configuration and settings.

This module provides the configuration model and I/O functions for
crateback. Configuration is stored in ~/.config/crateback/config.toml;
a missing file means all defaults apply.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crateback.core.paths import (
    DEFAULT_BACKUP_FILENAME,
    get_bin_dir,
    get_cargo_home,
    get_config_path,
    get_crates_path,
    get_default_backup_path,
)

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Configuration for crateback.

    Attributes:
        cargo_home: Cargo home to back up. If None, $CARGO_HOME or ~/.cargo.
        backup_path: Local backup file. If None, ~/.config/crateback/crateback.json.
        gist_id: Gist used by push/pull. Created on first push if None.
        gist_filename: File name of the backup inside the gist.
        token_env: Environment variable holding the GitHub token.
        validation_workers: Threads used for binary validation.
        command_timeout: Timeout in seconds for a single cargo invocation.
    """

    model_config = ConfigDict(extra="forbid")

    cargo_home: Annotated[Path | None, Field(description="Cargo home directory")] = None
    backup_path: Annotated[Path | None, Field(description="Local backup file")] = None
    gist_id: Annotated[str | None, Field(description="Gist ID for remote sync")] = None
    gist_filename: Annotated[
        str,
        Field(min_length=1, description="Backup file name inside the gist"),
    ] = DEFAULT_BACKUP_FILENAME
    token_env: Annotated[
        str,
        Field(min_length=1, description="Environment variable holding the GitHub token"),
    ] = "GITHUB_TOKEN"
    validation_workers: Annotated[
        int,
        Field(ge=1, le=64, description="Binary validation threads (1-64)"),
    ] = 8
    command_timeout: Annotated[
        float,
        Field(gt=0, description="Timeout for a single cargo invocation in seconds"),
    ] = 1800.0

    @property
    def effective_cargo_home(self) -> Path:
        """Cargo home after applying environment defaults."""
        return get_cargo_home(self.cargo_home)

    @property
    def crates_path(self) -> Path:
        """Cargo's installed-package registry file."""
        return get_crates_path(self.cargo_home)

    @property
    def bin_dir(self) -> Path:
        """Cargo's binaries directory."""
        return get_bin_dir(self.cargo_home)

    @property
    def effective_backup_path(self) -> Path:
        """Local backup file after applying defaults."""
        if self.backup_path is not None:
            return self.backup_path.expanduser()
        return get_default_backup_path()

    def github_token(self) -> str | None:
        """Read the GitHub token from the configured environment variable."""
        return os.environ.get(self.token_env) or None


class ConfigError(Exception):
    """Raised when the configuration cannot be read, validated or written."""


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated Settings; defaults if the file doesn't exist.

    Raises:
        ConfigError: If the file is unreadable, not TOML, or invalid.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return Settings()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: Settings to save.
        path: Destination. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def update_setting(settings: Settings, key: str, value: str) -> Settings:
    """Return a copy of ``settings`` with one key set from a string value.

    Raises:
        ConfigError: If the key is unknown or the value is invalid.
    """
    if key not in Settings.model_fields:
        known = ", ".join(sorted(Settings.model_fields))
        raise ConfigError(f"Unknown setting {key!r}. Known settings: {known}")

    data = settings.model_dump()
    data[key] = value or None
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {e}") from e


def _settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Convert Settings to a dictionary for TOML serialization.

    TOML has no null, so unset values are omitted; defaults are omitted
    to keep the file short.
    """
    defaults = Settings()
    result: dict[str, Any] = {}
    for name in Settings.model_fields:
        value = getattr(settings, name)
        if value is None or value == getattr(defaults, name):
            continue
        result[name] = str(value) if isinstance(value, Path) else value
    return result
