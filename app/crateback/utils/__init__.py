"""Console output and subprocess helpers shared by the CLI and core.

The cargo adapter runs commands through run_command; commands report
through the print_* helpers.
"""

from crateback.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from crateback.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
