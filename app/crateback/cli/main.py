"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from crateback import __version__
from crateback.cli.commands import backup, config, diff, history, restore, sync
from crateback.utils.formatting import err_console

app = typer.Typer(
    name="crateback",
    help="Back up and restore globally installed Cargo packages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"crateback version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to stderr through Rich.

    Warnings are shown by default, everything with --verbose and only
    errors with --quiet.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log errors."),
    ] = False,
) -> None:
    """crateback - Back up and restore globally installed Cargo packages.

    Capture what 'cargo install' put on this machine into a backup file,
    sync it through a GitHub gist, and restore it anywhere.
    """
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


app.add_typer(backup.app, name="backup")
app.add_typer(diff.app, name="diff")
app.add_typer(restore.app, name="restore")
app.add_typer(sync.app, name="sync")
app.add_typer(history.app, name="history")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
