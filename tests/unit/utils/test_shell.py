"""Unit tests for shell execution utilities."""

import os
from unittest.mock import MagicMock, patch

from crateback.utils.shell import CommandResult, command_exists, run_command


def _result(stderr: str = "", returncode: int = 1) -> CommandResult:
    return CommandResult(
        args=("cargo", "install", "bat"), stdout="", stderr=stderr, returncode=returncode
    )


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """Only exit status 0 is a success."""
        assert _result(returncode=0).success
        assert not _result(returncode=1).success

    def test_error_summary_last_line(self) -> None:
        """The last non-blank stderr line summarizes the failure."""
        result = _result(stderr="   Compiling bat\nerror: failed to compile `bat`\n\n")
        assert result.error_summary == "error: failed to compile `bat`"

    def test_error_summary_skips_trailing_hint(self) -> None:
        """Cargo's hint after a failed build does not hide the error."""
        stderr = (
            "   Compiling bat v0.24.0\n"
            "error: failed to compile `bat v0.24.0`, intermediate artifacts can be found at "
            "`/tmp/cargo-installXYZ`.\n"
            "To reuse those artifacts with a future compilation, set the environment "
            "variable `CARGO_TARGET_DIR` to that path.\n"
        )
        summary = _result(stderr=stderr, returncode=101).error_summary
        assert summary.startswith("error: failed to compile `bat v0.24.0`")

    def test_error_summary_without_error_line(self) -> None:
        """Without an error line the last non-blank line is used."""
        assert _result(stderr="warning: odd\nKilled\n\n").error_summary == "Killed"

    def test_error_summary_without_stderr(self) -> None:
        """Without stderr the exit status is reported."""
        assert _result(returncode=101).error_summary == "cargo exited with 101"


class TestRunCommand:
    """Tests for run_command."""

    @patch("crateback.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """Output and status are copied into the result."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["cargo", "--version"], timeout=5.0)

        assert result == CommandResult(
            args=("cargo", "--version"), stdout="out", stderr="err", returncode=3
        )
        kwargs = mock_run.call_args.kwargs
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True
        assert kwargs["check"] is False
        assert kwargs["timeout"] == 5.0
        assert kwargs["env"] is None

    @patch("crateback.utils.shell.subprocess.run")
    def test_env_extends_environment(self, mock_run: MagicMock) -> None:
        """Extra variables are layered over the current environment."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["cargo", "install", "bat"], env={"CARGO_HOME": "/opt/cargo"})

        env = mock_run.call_args.kwargs["env"]
        assert env["CARGO_HOME"] == "/opt/cargo"
        assert env.get("PATH") == os.environ.get("PATH")


class TestCommandExists:
    """Tests for command_exists."""

    @patch("crateback.utils.shell.shutil.which", return_value="/usr/bin/cargo")
    def test_found(self, mock_which: MagicMock) -> None:
        """A PATH hit means the command exists."""
        assert command_exists("cargo")
        mock_which.assert_called_once_with("cargo")

    @patch("crateback.utils.shell.shutil.which", return_value=None)
    def test_missing(self, _mock_which: MagicMock) -> None:
        """No PATH hit means the command is missing."""
        assert not command_exists("cargo")
