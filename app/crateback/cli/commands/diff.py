"""Diff command implementation.

Compares a backup with the installed packages without changing anything.
"""

import json
from typing import Annotated

import typer

from crateback.cli.common import (
    FileOption,
    SkipInstallOption,
    SkipRemoveOption,
    SkipUpdateOption,
    require_manifest,
    require_plan,
    require_settings,
)
from crateback.cli.display import create_plan_table, print_in_sync, print_plan_summary
from crateback.models.action import SkipFlags
from crateback.utils.formatting import console

app = typer.Typer(
    help="Compare a backup with installed packages.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def diff_packages(
    ctx: typer.Context,
    file: FileOption = None,
    skip_install: SkipInstallOption = False,
    skip_update: SkipUpdateOption = False,
    skip_remove: SkipRemoveOption = False,
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Also list unchanged packages."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for scripting."),
    ] = False,
) -> None:
    """Compare a backup with installed packages.

    Shows what 'crateback restore' would do. Packages whose binaries are
    missing from the Cargo bin directory are reported as reinstalls even
    if Cargo still lists them as installed.

    Examples:
        crateback diff                  # Show planned changes
        crateback diff --all            # Include unchanged packages
        crateback diff --json           # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = require_settings()
    manifest = require_manifest(file or settings.effective_backup_path)
    skip = SkipFlags(skip_install=skip_install, skip_update=skip_update, skip_remove=skip_remove)
    plan = require_plan(settings, manifest, skip)

    if json_output:
        typer.echo(json.dumps(plan.to_dict(), indent=2))
        return

    if plan.is_in_sync and not show_all:
        print_plan_summary(plan)
        print_in_sync(plan)
        return

    console.print(create_plan_table(plan, dry_run=True, show_noop=show_all))
    print_plan_summary(plan)
