"""Subprocess helpers for running package manager commands.

Output is captured rather than streamed; callers decide what to show.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of one command.

    Attributes:
        args: Command line that was run.
        stdout: Standard output.
        stderr: Standard error.
        returncode: Exit status.
    """

    args: tuple[str, ...]
    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the command exited with status 0."""
        return self.returncode == 0

    @property
    def error_summary(self) -> str:
        """Last ``error`` line of stderr.

        Cargo may print hints after its error, e.g. about reusing build
        artifacts, so the last non-blank line is only a fallback. Without
        stderr the exit status is reported.
        """
        lines = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        for line in reversed(lines):
            if line.startswith("error"):
                return line
        if lines:
            return lines[-1]
        return f"{self.args[0] if self.args else 'command'} exited with {self.returncode}"


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Run a command to completion and capture its output.

    Args:
        args: Command and arguments.
        timeout: Seconds to wait before giving up. None waits forever.
        env: Variables set on top of the current environment.

    Returns:
        CommandResult; a non-zero exit is not an exception.

    Raises:
        subprocess.TimeoutExpired: If the command exceeds the timeout.
        OSError: If the executable cannot be started.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
        env={**os.environ, **env} if env else None,
    )
    return CommandResult(
        args=tuple(args),
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH."""
    return shutil.which(name) is not None
