"""Path management for crateback.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage, and locates the
Cargo installation whose packages are backed up.

XDG defaults:
- Config: ~/.config/crateback/
- State: ~/.local/state/crateback/

Cargo defaults:
- Home: $CARGO_HOME or ~/.cargo
- Registry: <cargo home>/.crates2.json
- Binaries: <cargo home>/bin
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "crateback"

# File Cargo records `cargo install` metadata in
CRATES_FILENAME = ".crates2.json"

DEFAULT_BACKUP_FILENAME = "crateback.json"

HISTORY_FILENAME = "history.jsonl"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/crateback/ (or XDG_CONFIG_HOME/crateback/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Returns:
        Path to ~/.local/state/crateback/ (or XDG_STATE_HOME/crateback/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the user configuration file path.

    Returns:
        Path to ~/.config/crateback/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_default_backup_path() -> Path:
    """Get the default backup manifest path.

    Returns:
        Path to ~/.config/crateback/crateback.json.
    """
    return get_config_dir() / DEFAULT_BACKUP_FILENAME


def get_history_path(state_dir: Path | None = None) -> Path:
    """Get the history file path.

    Args:
        state_dir: State directory to use instead of the XDG default.

    Returns:
        Path to ~/.local/state/crateback/history.jsonl.
    """
    return (state_dir or get_state_dir()) / HISTORY_FILENAME


def get_cargo_home(override: Path | None = None) -> Path:
    """Get the Cargo home directory.

    Args:
        override: Explicit Cargo home, e.g. from the user configuration.

    Returns:
        The override if given, else $CARGO_HOME, else ~/.cargo.
    """
    if override is not None:
        return override.expanduser()
    env = os.environ.get("CARGO_HOME")
    if env:
        return Path(env)
    return Path.home() / ".cargo"


def get_crates_path(cargo_home: Path | None = None) -> Path:
    """Get the path of Cargo's installed-package registry file."""
    return get_cargo_home(cargo_home) / CRATES_FILENAME


def get_bin_dir(cargo_home: Path | None = None) -> Path:
    """Get the directory Cargo installs binaries into."""
    return get_cargo_home(cargo_home) / "bin"


def ensure_dir(path: Path, name: str) -> Path:
    """Create a directory and its parents if they don't exist.

    Args:
        path: Directory to create.
        name: What the directory holds, for the error message.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path

