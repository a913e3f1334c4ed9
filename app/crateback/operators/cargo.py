"""Cargo package operator implementation.

Runs planned cargo install/uninstall invocations, one action at a time.
"""

import logging
import subprocess
from pathlib import Path

from crateback.core.planner import CARGO, plan_invocation
from crateback.models.action import Action, ActionResult
from crateback.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


class CargoOperator:
    """Operator executing reconciliation actions with Cargo.

    Attributes:
        dry_run: If True, only report the planned command lines.
        timeout: Maximum time in seconds for a single invocation.
        cargo_home: Cargo home the commands act on. If None, cargo's own
            default applies.

    Example:
        >>> operator = CargoOperator(dry_run=True)
        >>> if operator.is_available():
        ...     result = operator.run(action)
    """

    # Building from source can take a long time
    DEFAULT_TIMEOUT: float = 1800.0

    def __init__(
        self,
        dry_run: bool = False,
        timeout: float | None = None,
        cargo_home: Path | None = None,
    ) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only simulate actions without executing them.
            timeout: Per-invocation timeout in seconds.
            cargo_home: Exported as CARGO_HOME to every invocation.
        """
        self._dry_run = dry_run
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT
        self._cargo_home = cargo_home

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @property
    def timeout(self) -> float:
        """Per-invocation timeout in seconds."""
        return self._timeout

    @property
    def cargo_home(self) -> Path | None:
        """Cargo home passed to cargo, if any."""
        return self._cargo_home

    def is_available(self) -> bool:
        """Check if cargo is available."""
        return command_exists(CARGO)

    def run(self, action: Action) -> ActionResult:
        """Execute a single action.

        Failures of the cargo process are reported in the result rather
        than raised.

        Args:
            action: INSTALL, UPDATE or REMOVE action.

        Returns:
            ActionResult describing the outcome.

        Raises:
            ValueError: If the action is a NOOP.
        """
        invocation = plan_invocation(action)

        if self.dry_run:
            return ActionResult(action=action, success=True, message=f"Would run: {invocation}")

        logger.info("Running %s", invocation)

        try:
            result = run_command(invocation.argv, timeout=self.timeout, env=self._env())
        except subprocess.TimeoutExpired:
            return ActionResult(
                action=action,
                success=False,
                error=f"Timed out after {self.timeout:.0f}s: {invocation}",
            )
        except OSError as e:
            return ActionResult(action=action, success=False, error=f"Failed to run cargo: {e}")

        if result.success:
            return ActionResult(action=action, success=True, message="Operation completed")

        logger.warning("%s failed: %s", invocation, result.stderr.strip())
        return ActionResult(action=action, success=False, error=result.error_summary)

    def _env(self) -> dict[str, str] | None:
        if self._cargo_home is None:
            return None
        return {"CARGO_HOME": str(self._cargo_home)}
