"""History command for viewing past restore actions."""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.table import Table

from crateback.core.state import StateManager
from crateback.models.history import HistoryEntry
from crateback.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View history of package changes.",
    invoke_without_command=True,
)

_MAX_LISTED = 3


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Maximum number of entries to show.", min=1),
    ] = 20,
    since: Annotated[
        str | None,
        typer.Option("--since", help="Show entries since date (YYYY-MM-DD)."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON."),
    ] = False,
) -> None:
    """Show history of package changes made by restore.

    Examples:
        crateback history              # Show last 20 entries
        crateback history -n 50        # Show last 50 entries
        crateback history --since 2026-01-01
        crateback history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    entries = StateManager().get_history(limit=limit)

    if since:
        try:
            entries = _filter_since(entries, since)
        except ValueError:
            typer.echo(f"Invalid date format: {since}. Use YYYY-MM-DD.", err=True)
            raise typer.Exit(code=1) from None

    if json_output:
        typer.echo(json.dumps([entry.to_dict() for entry in entries], indent=2))
        return

    if not entries:
        print_info("No history entries found.")
        return

    _print_table(entries)


def _filter_since(entries: list[HistoryEntry], since: str) -> list[HistoryEntry]:
    """Keep entries at or after ``since``.

    A date without timezone is compared by calendar day.

    Raises:
        ValueError: If ``since`` is not an ISO date.
    """
    since_parsed = datetime.fromisoformat(since)
    if since_parsed.tzinfo is None:
        since_date = since_parsed.strftime("%Y-%m-%d")
        return [e for e in entries if e.timestamp[:10] >= since_date]
    return [e for e in entries if _parse_timestamp(e.timestamp) >= since_parsed]


def _parse_timestamp(iso_timestamp: str) -> datetime:
    return datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))


def _print_table(entries: list[HistoryEntry]) -> None:
    table = Table(title="Package History", border_style="border")
    table.add_column("ID", style="muted")
    table.add_column("Timestamp", style="info")
    table.add_column("Action")
    table.add_column("Packages")
    table.add_column("Command", style="muted")

    for entry in entries:
        names = [item.name for item in entry.items[:_MAX_LISTED]]
        listed = ", ".join(names)
        if len(entry.items) > _MAX_LISTED:
            listed += f" (+{len(entry.items) - _MAX_LISTED} more)"

        table.add_row(
            entry.id[:8],
            _parse_timestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M"),
            entry.action_type.value,
            listed,
            str(entry.metadata.get("command", "")),
        )

    console.print(table)
