"""Restore command implementation.

Brings the installed packages in line with a backup by removing,
installing and updating packages with Cargo.
"""

from typing import Annotated

import typer
from rich.markup import escape

from crateback.cli.common import (
    FileOption,
    SkipInstallOption,
    SkipRemoveOption,
    SkipUpdateOption,
    require_manifest,
    require_plan,
    require_settings,
)
from crateback.cli.display import (
    create_plan_table,
    create_results_table,
    print_in_sync,
    print_plan_summary,
    print_results_summary,
)
from crateback.core.config import Settings
from crateback.core.executor import execute_plan, record_results_to_history
from crateback.models.action import ActionResult, SkipFlags
from crateback.models.manifest import BackupManifest
from crateback.operators.cargo import CargoOperator
from crateback.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Restore installed packages from a backup.",
    invoke_without_command=True,
)

YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Skip confirmation prompt and proceed."),
]
DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", "-n", help="Show what would be done without making changes."),
]


def _confirm_actions(action_count: int) -> bool:
    """Prompt user to confirm action execution."""
    return typer.confirm(
        f"\nProceed with {action_count} action(s)?",
        default=False,
    )


def run_restore(
    manifest: BackupManifest,
    settings: Settings,
    skip: SkipFlags,
    yes: bool = False,
    dry_run: bool = False,
    command: str = "crateback restore",
) -> None:
    """Reconcile, confirm and execute a restore.

    Shared by the restore and pull commands.

    Raises:
        typer.Exit: On fatal errors, on abort, or with code 1 if any
            action failed.
    """
    plan = require_plan(settings, manifest, skip)

    if plan.is_in_sync:
        print_plan_summary(plan)
        print_in_sync(plan)
        return

    console.print(create_plan_table(plan, dry_run=dry_run))
    print_plan_summary(plan)

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")
        return

    if not yes and not _confirm_actions(len(plan.executable)):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    operator = CargoOperator(
        timeout=settings.command_timeout, cargo_home=settings.effective_cargo_home
    )
    if not operator.is_available():
        print_error("cargo was not found on PATH.")
        raise typer.Exit(code=1)

    console.print("\n[bold]Executing actions...[/bold]\n")

    def _report(result: ActionResult) -> None:
        status = "[success]OK[/success]" if result.success else "[error]FAIL[/error]"
        console.print(f"{status} {result.action.action_type.value} {escape(result.action.name)}")

    results = execute_plan(plan, operator, on_result=_report)

    console.print(create_results_table(results))
    print_results_summary(results)
    record_results_to_history(results, command=command)

    if any(r.failed for r in results):
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def restore_packages(
    ctx: typer.Context,
    file: FileOption = None,
    skip_install: SkipInstallOption = False,
    skip_update: SkipUpdateOption = False,
    skip_remove: SkipRemoveOption = False,
    yes: YesOption = False,
    dry_run: DryRunOption = False,
) -> None:
    """Restore installed packages from a backup.

    Actions are executed in this order:
      - REMOVE packages installed locally but absent from the backup
      - INSTALL packages missing locally, or whose binaries are gone
      - UPDATE packages whose version, source, profile, target or
        features differ from the backup

    Examples:
        crateback restore --dry-run         # Preview changes
        crateback restore --yes             # Restore without confirmation
        crateback restore --skip-remove     # Keep packages not in the backup
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = require_settings()
    manifest = require_manifest(file or settings.effective_backup_path)
    skip = SkipFlags(skip_install=skip_install, skip_update=skip_update, skip_remove=skip_remove)

    run_restore(manifest, settings, skip, yes=yes, dry_run=dry_run)
