"""CLI commands for crateback.

This package contains all subcommand implementations.
"""

from crateback.cli.commands import backup, config, diff, history, restore, sync

__all__ = ["backup", "config", "diff", "history", "restore", "sync"]
