"""Backup command implementation.

Captures the globally installed Cargo packages into a backup file.
"""

from pathlib import Path
from typing import Annotated

import typer

from crateback.cli.common import require_local_state, require_settings
from crateback.core.manifest import ManifestWriteError, save_manifest
from crateback.core.registry import capture_manifest
from crateback.utils.formatting import print_error, print_success, print_warning

app = typer.Typer(
    help="Back up installed packages to a file.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def backup_packages(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Where to write the backup (default: configured backup path).",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """Back up installed packages to a file.

    Reads Cargo's install registry and writes every installed package
    with its version, source, profile, target and features.

    Examples:
        crateback backup                     # Write to the default backup path
        crateback backup -o ~/crates.json    # Write to a custom file
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = require_settings()
    snapshot = require_local_state(settings)

    if not len(snapshot):
        print_warning("No installed packages found.")

    manifest = capture_manifest(snapshot)
    path = output or settings.effective_backup_path

    try:
        saved_path = save_manifest(manifest, path)
    except ManifestWriteError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Backed up {manifest.package_count} package(s) to {saved_path}")
