"""CLI package for crateback.

This package contains the Typer application and all subcommands.
"""

from crateback.cli.main import app

__all__ = ["app"]
