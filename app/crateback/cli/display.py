"""Shared Rich display functions for plans and results.

Provides reusable table builders and summary printers used by the
diff, restore and pull commands.
"""

from rich.markup import escape
from rich.table import Table

from crateback.models.action import Action, ActionPlan, ActionResult, ActionType
from crateback.models.package import PackageRecord
from crateback.utils.formatting import console, print_success

# Markup label and style per action type
_ACTION_STYLES: dict[ActionType, tuple[str, str]] = {
    ActionType.REMOVE: ("-remove", "removed"),
    ActionType.INSTALL: ("+install", "added"),
    ActionType.UPDATE: ("~update", "changed"),
    ActionType.NOOP: ("=", "muted"),
}


def format_record(record: PackageRecord | None) -> str:
    """Format a record as ``version (source)`` for table cells.

    Record fields are escaped; paths and refs may contain brackets.
    """
    if record is None:
        return "-"
    version = escape(record.version or "?")
    return f"{version} [muted]({escape(record.source_display)})[/muted]"


def _action_label(action: Action) -> tuple[str, str]:
    label, style = _ACTION_STYLES[action.action_type]
    if action.is_reinstall:
        label = "+reinstall"
    return label, style


def create_plan_table(plan: ActionPlan, dry_run: bool = False, show_noop: bool = False) -> Table:
    """Create a Rich table displaying a plan's actions.

    Args:
        plan: Plan from reconciliation.
        dry_run: Whether this is a dry-run (changes table title).
        show_noop: Also list packages that need no action.

    Returns:
        Rich Table configured for plan display.
    """
    title = "Planned Actions (Dry Run)" if dry_run else "Planned Actions"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Action", width=10, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Installed")
    table.add_column("Backup")
    table.add_column("Reason")

    for action in plan.actions:
        if action.is_noop and not show_noop:
            continue
        label, style = _action_label(action)
        table.add_row(
            f"[{style}]{label}[/{style}]",
            f"[{style}]{escape(action.name)}[/{style}]",
            format_record(action.current),
            format_record(action.record),
            f"[muted]{escape(action.reason or '')}[/muted]",
        )

    return table


def create_results_table(results: list[ActionResult]) -> Table:
    """Create a Rich table displaying action results."""
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Action", width=8)
    table.add_column("Package", no_wrap=True)
    table.add_column("Message")

    for result in results:
        if result.success:
            status = "[success]OK[/success]"
            message = result.message or ""
        else:
            status = "[error]FAIL[/error]"
            message = result.error or "Unknown error"

        table.add_row(
            status,
            result.action.action_type.value,
            escape(result.action.name),
            f"[muted]{escape(message)}[/muted]",
        )

    return table


def print_plan_summary(plan: ActionPlan) -> None:
    """Print the unfiltered counts of a plan and what skip flags dropped."""
    report = plan.report

    parts: list[str] = []
    if report.install:
        reinstall = f" ({report.reinstall} reinstall)" if report.reinstall else ""
        parts.append(f"[added]{report.install} to install{reinstall}[/added]")
    if report.update:
        parts.append(f"[changed]{report.update} to update[/changed]")
    if report.remove:
        parts.append(f"[removed]{report.remove} to remove[/removed]")
    if report.noop:
        parts.append(f"[muted]{report.noop} unchanged[/muted]")

    if parts:
        console.print(f"\nSummary: {', '.join(parts)}")
    if plan.skipped:
        console.print(f"[muted]{plan.skipped} change(s) skipped by flags[/muted]")


def print_in_sync(plan: ActionPlan) -> None:
    """Print the "already in sync" message for an empty plan."""
    if plan.skipped:
        print_success("Nothing to do: all remaining changes are skipped by flags.")
    else:
        print_success("Your system is already in sync with the backup. Nothing to do.")


def print_results_summary(results: list[ActionResult]) -> None:
    """Print a summary of action results."""
    success_count = sum(1 for r in results if r.success)
    fail_count = sum(1 for r in results if r.failed)

    if fail_count == 0:
        print_success(f"All {success_count} action(s) completed successfully.")
    else:
        console.print(
            f"\n[success]{success_count} succeeded[/success], [error]{fail_count} failed[/error]"
        )
