"""Config command implementation.

Shows and changes the settings stored in ~/.config/crateback/config.toml.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from crateback.cli.common import require_settings
from crateback.core.config import ConfigError, Settings, save_settings, update_setting
from crateback.core.paths import get_config_path
from crateback.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="Show or change configuration.",
    no_args_is_help=True,
)


def _effective_values(settings: Settings) -> dict[str, str | int | float | bool | None]:
    """Settings with defaults resolved, for display."""
    return {
        "cargo_home": str(settings.effective_cargo_home),
        "backup_path": str(settings.effective_backup_path),
        "gist_id": settings.gist_id,
        "gist_filename": settings.gist_filename,
        "token_env": settings.token_env,
        "token_present": settings.github_token() is not None,
        "validation_workers": settings.validation_workers,
        "command_timeout": settings.command_timeout,
    }


@app.command("show")
def show_config(
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON."),
    ] = False,
) -> None:
    """Show the effective configuration."""
    settings = require_settings()
    values = _effective_values(settings)

    if json_output:
        typer.echo(json.dumps(values, indent=2))
        return

    table = Table(title=f"Configuration ({get_config_path()})", border_style="border")
    table.add_column("Setting", style="header")
    table.add_column("Value")

    for key, value in values.items():
        table.add_row(key, "[muted]unset[/muted]" if value is None else str(value))

    console.print(table)


@app.command("set")
def set_config(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. gist_id.")],
    value: Annotated[str, typer.Argument(help="New value. An empty string unsets it.")],
) -> None:
    """Change one setting.

    Examples:
        crateback config set gist_id 0123456789abcdef
        crateback config set cargo_home ~/.local/cargo
        crateback config set gist_id ""        # Unset
    """
    settings = require_settings()

    try:
        updated = update_setting(settings, key, value)
        path = save_settings(updated)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Set {key} in {path}")
