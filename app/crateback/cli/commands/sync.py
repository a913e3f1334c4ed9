"""Sync command implementation.

Pushes backups to and pulls them from a GitHub gist so several
machines can share one set of installed packages.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from crateback.cli.commands.restore import DryRunOption, YesOption, run_restore
from crateback.cli.common import (
    FileOption,
    SkipInstallOption,
    SkipRemoveOption,
    SkipUpdateOption,
    require_local_state,
    require_manifest,
    require_settings,
)
from crateback.core.config import ConfigError, Settings, save_settings
from crateback.core.manifest import (
    ManifestReadError,
    ManifestWriteError,
    dump_manifest,
    parse_manifest,
    save_manifest,
)
from crateback.core.registry import capture_manifest
from crateback.models.action import SkipFlags
from crateback.remote.gist import GistClient, RemoteError
from crateback.utils.formatting import print_error, print_info, print_success, print_warning

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Sync backups with a GitHub gist.",
    no_args_is_help=True,
)

GistOption = Annotated[
    str | None,
    typer.Option("--gist", "-g", help="Gist ID (default: configured gist_id)."),
]


def _require_token(settings: Settings) -> str:
    """Read the GitHub token or exit.

    Raises:
        typer.Exit: If the token environment variable is not set.
    """
    token = settings.github_token()
    if not token:
        print_error(f"No GitHub token found. Set the {settings.token_env} environment variable.")
        raise typer.Exit(code=1)
    return token


@app.command("push")
def push_backup(
    file: FileOption = None,
    gist: GistOption = None,
) -> None:
    """Upload a backup to the gist.

    Without --file the current installed packages are captured first.
    If no gist is configured, a new secret gist is created and its ID
    stored in the configuration.

    Examples:
        crateback sync push                 # Capture and upload
        crateback sync push -f backup.json  # Upload an existing backup
    """
    settings = require_settings()
    token = _require_token(settings)

    if file is not None:
        manifest = require_manifest(file)
    else:
        manifest = capture_manifest(require_local_state(settings))
        try:
            save_manifest(manifest, settings.effective_backup_path)
        except ManifestWriteError as e:
            print_warning(f"Could not save local copy of backup: {e}")

    content = dump_manifest(manifest)
    gist_id = gist or settings.gist_id

    try:
        with GistClient(token=token) as client:
            if gist_id:
                client.push(gist_id, settings.gist_filename, content)
            else:
                gist_id = client.create(settings.gist_filename, content)
    except RemoteError as e:
        print_error(f"Remote sync failed: {e}")
        raise typer.Exit(code=1) from e

    if settings.gist_id != gist_id:
        try:
            save_settings(settings.model_copy(update={"gist_id": gist_id}))
            print_info(f"Saved gist ID {gist_id} to configuration.")
        except ConfigError as e:
            print_warning(f"Could not save gist ID {gist_id}: {e}")

    print_success(f"Pushed {manifest.package_count} package(s) to gist {gist_id}")


@app.command("pull")
def pull_backup(
    gist: GistOption = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Where to save the pulled backup (default: configured backup path).",
            dir_okay=False,
        ),
    ] = None,
    restore: Annotated[
        bool,
        typer.Option("--restore", "-r", help="Restore packages from the pulled backup."),
    ] = False,
    skip_install: SkipInstallOption = False,
    skip_update: SkipUpdateOption = False,
    skip_remove: SkipRemoveOption = False,
    yes: YesOption = False,
    dry_run: DryRunOption = False,
) -> None:
    """Download the backup from the gist.

    Examples:
        crateback sync pull                    # Download and save
        crateback sync pull --restore --yes    # Download and restore
    """
    settings = require_settings()
    gist_id = gist or settings.gist_id
    if not gist_id:
        print_error("No gist configured. Pass --gist or run 'crateback sync push' first.")
        raise typer.Exit(code=1)

    try:
        with GistClient(token=settings.github_token()) as client:
            content = client.pull(gist_id, settings.gist_filename)
    except RemoteError as e:
        print_error(f"Remote sync failed: {e}")
        raise typer.Exit(code=1) from e

    try:
        manifest = parse_manifest(content)
    except ManifestReadError as e:
        print_error(f"Pulled backup is invalid: {e}")
        raise typer.Exit(code=1) from e

    path = output or settings.effective_backup_path
    try:
        save_manifest(manifest, path)
    except ManifestWriteError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Pulled {manifest.package_count} package(s) from gist {gist_id} to {path}")

    if restore:
        skip = SkipFlags(
            skip_install=skip_install,
            skip_update=skip_update,
            skip_remove=skip_remove,
        )
        run_restore(
            manifest, settings, skip, yes=yes, dry_run=dry_run, command="crateback sync pull"
        )
