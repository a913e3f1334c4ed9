"""Shared helpers for CLI commands.

Each helper wraps one fallible step (configuration, backup, local
state) and turns its errors into a user-facing message naming the input
at fault, followed by ``typer.Exit(code=1)``.
"""

from pathlib import Path
from typing import Annotated

import typer

from crateback.core.config import ConfigError, Settings, load_settings
from crateback.core.manifest import ManifestNotFoundError, ManifestReadError, load_manifest
from crateback.core.reconcile import ReconciliationEngine
from crateback.core.registry import StateReadError, read_snapshot
from crateback.core.validator import ValidationIOError
from crateback.models.action import ActionPlan, SkipFlags
from crateback.models.manifest import BackupManifest
from crateback.models.snapshot import LocalSnapshot
from crateback.utils.formatting import print_error, print_info

# Reusable option declarations
FileOption = Annotated[
    Path | None,
    typer.Option(
        "--file",
        "-f",
        help="Backup file to use (default: configured backup path).",
        dir_okay=False,
    ),
]
SkipInstallOption = Annotated[
    bool,
    typer.Option("--skip-install", help="Do not install missing packages."),
]
SkipUpdateOption = Annotated[
    bool,
    typer.Option("--skip-update", help="Do not update changed packages."),
]
SkipRemoveOption = Annotated[
    bool,
    typer.Option("--skip-remove", help="Do not remove packages absent from the backup."),
]


def require_settings() -> Settings:
    """Load settings or exit with an error message.

    Raises:
        typer.Exit: If the configuration is invalid.
    """
    try:
        return load_settings()
    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(code=1) from e


def require_manifest(path: Path) -> BackupManifest:
    """Load a backup manifest or exit with a helpful error message.

    Raises:
        typer.Exit: If the backup cannot be loaded.
    """
    try:
        return load_manifest(path)
    except ManifestNotFoundError as e:
        print_error(f"Backup not found: {path}")
        print_info("Run 'crateback backup' or 'crateback sync pull' to create one.")
        raise typer.Exit(code=1) from e
    except ManifestReadError as e:
        print_error(f"Failed to load backup: {e}")
        raise typer.Exit(code=1) from e


def require_local_state(settings: Settings) -> LocalSnapshot:
    """Read the unvalidated local snapshot or exit.

    Raises:
        typer.Exit: If the Cargo registry cannot be read.
    """
    try:
        return read_snapshot(settings.crates_path)
    except StateReadError as e:
        print_error(f"Cannot read local package state: {e}")
        raise typer.Exit(code=1) from e


def require_plan(settings: Settings, manifest: BackupManifest, skip: SkipFlags) -> ActionPlan:
    """Reconcile a manifest with freshly read local state or exit.

    Raises:
        typer.Exit: If local state cannot be read or validated.
    """
    engine = ReconciliationEngine(
        settings.crates_path,
        settings.bin_dir,
        max_workers=settings.validation_workers,
    )
    try:
        return engine.run(manifest, skip)
    except StateReadError as e:
        print_error(f"Cannot read local package state: {e}")
        raise typer.Exit(code=1) from e
    except ValidationIOError as e:
        print_error(f"Cannot validate installed binaries: {e}")
        raise typer.Exit(code=1) from e
