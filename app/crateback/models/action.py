"""Action models for package reconciliation.

This module defines the classified actions produced by reconciliation,
the ordered action plan consumed by the executor, the invocation
descriptors handed to Cargo, and the results of executing them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from crateback.models.package import PackageRecord


class ActionType(Enum):
    """Type of reconciliation action.

    Attributes:
        INSTALL: Package is in the backup but not usable locally.
        UPDATE: Package is installed but its metadata differs from the backup.
        REMOVE: Package is installed but absent from the backup.
        NOOP: Package is installed and matches the backup.
    """

    INSTALL = "install"
    UPDATE = "update"
    REMOVE = "remove"
    NOOP = "noop"


# Execution order of action types within a plan
ACTION_ORDER: tuple[ActionType, ...] = (
    ActionType.REMOVE,
    ActionType.INSTALL,
    ActionType.UPDATE,
    ActionType.NOOP,
)


@dataclass(frozen=True, slots=True)
class SkipFlags:
    """Action categories to drop from the executable plan.

    Attributes:
        skip_install: Drop all INSTALL actions.
        skip_update: Drop all UPDATE actions.
        skip_remove: Drop all REMOVE actions.
    """

    skip_install: bool = False
    skip_update: bool = False
    skip_remove: bool = False

    def allows(self, action_type: ActionType) -> bool:
        """Check whether actions of the given type survive filtering."""
        if action_type == ActionType.INSTALL:
            return not self.skip_install
        if action_type == ActionType.UPDATE:
            return not self.skip_update
        if action_type == ActionType.REMOVE:
            return not self.skip_remove
        return True


@dataclass(frozen=True, slots=True)
class Action:
    """A single classified package action.

    Attributes:
        action_type: The classification of this package.
        name: Package name.
        record: Desired record from the backup (None for REMOVE).
        current: Record currently registered locally (None for a fresh INSTALL).
        reason: Explanation for the classification.
    """

    action_type: ActionType
    name: str
    record: PackageRecord | None = None
    current: PackageRecord | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate that the records required by the action type are set."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if self.action_type != ActionType.REMOVE and self.record is None:
            msg = f"{self.action_type.value} action for {self.name} requires a target record"
            raise ValueError(msg)
        if self.action_type in (ActionType.UPDATE, ActionType.REMOVE) and self.current is None:
            msg = f"{self.action_type.value} action for {self.name} requires the current record"
            raise ValueError(msg)

    @property
    def is_install(self) -> bool:
        """Check if this is an install action."""
        return self.action_type == ActionType.INSTALL

    @property
    def is_update(self) -> bool:
        """Check if this is an update action."""
        return self.action_type == ActionType.UPDATE

    @property
    def is_remove(self) -> bool:
        """Check if this is a remove action."""
        return self.action_type == ActionType.REMOVE

    @property
    def is_noop(self) -> bool:
        """Check if this package needs no action."""
        return self.action_type == ActionType.NOOP

    @property
    def is_reinstall(self) -> bool:
        """Check if this install replaces a registered but broken package."""
        return self.is_install and self.current is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result: dict[str, Any] = {"action": self.action_type.value, "name": self.name}
        if self.record is not None:
            result["to"] = self.record.model_dump(mode="json")
        if self.current is not None:
            result["from"] = self.current.model_dump(mode="json")
        if self.reason:
            result["reason"] = self.reason
        return result


@dataclass(frozen=True, slots=True)
class DiffReport:
    """Per-category counts of the unfiltered classification.

    Skip flags never change these numbers.

    Attributes:
        install: Packages classified INSTALL.
        update: Packages classified UPDATE.
        remove: Packages classified REMOVE.
        noop: Packages classified NOOP.
        reinstall: INSTALL actions caused by missing binaries.
    """

    install: int = 0
    update: int = 0
    remove: int = 0
    noop: int = 0
    reinstall: int = 0

    @classmethod
    def from_actions(cls, actions: list[Action]) -> "DiffReport":
        """Count actions per category."""
        return cls(
            install=sum(1 for a in actions if a.is_install),
            update=sum(1 for a in actions if a.is_update),
            remove=sum(1 for a in actions if a.is_remove),
            noop=sum(1 for a in actions if a.is_noop),
            reinstall=sum(1 for a in actions if a.is_reinstall),
        )

    @property
    def total_changes(self) -> int:
        """Number of packages that differ from the backup."""
        return self.install + self.update + self.remove

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for JSON output."""
        return {
            "install": self.install,
            "update": self.update,
            "remove": self.remove,
            "noop": self.noop,
            "reinstall": self.reinstall,
            "total": self.total_changes,
        }


@dataclass(frozen=True, slots=True)
class ActionPlan:
    """Ordered, filtered result of one reconciliation run.

    Built fresh per run and consumed once by the executor.

    Attributes:
        actions: Filtered actions ordered REMOVE, INSTALL, UPDATE, NOOP.
        report: Counts of the unfiltered classification.
        skip: Skip flags that were applied.
    """

    actions: tuple[Action, ...]
    report: DiffReport
    skip: SkipFlags = field(default_factory=SkipFlags)

    @property
    def executable(self) -> tuple[Action, ...]:
        """Actions that invoke the package manager, in execution order."""
        return tuple(a for a in self.actions if not a.is_noop)

    @property
    def is_in_sync(self) -> bool:
        """Check whether there is nothing to execute."""
        return not self.executable

    @property
    def skipped(self) -> int:
        """Number of changes suppressed by skip flags."""
        return self.report.total_changes - len(self.executable)

    def of_type(self, action_type: ActionType) -> tuple[Action, ...]:
        """Actions of one type, in plan order."""
        return tuple(a for a in self.actions if a.action_type == action_type)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON output."""
        return {
            "in_sync": self.is_in_sync,
            "summary": self.report.to_dict(),
            "skipped": self.skipped,
            "actions": [a.to_dict() for a in self.actions],
        }


@dataclass(frozen=True, slots=True)
class Invocation:
    """Package manager command line planned for an action.

    Attributes:
        program: Executable to run (e.g. "cargo").
        args: Arguments passed to the program.
    """

    program: str
    args: tuple[str, ...]

    @property
    def argv(self) -> list[str]:
        """Full command line as a list."""
        return [self.program, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of executing a package action.

    Attributes:
        action: The action that was executed.
        success: Whether the action completed successfully.
        message: Optional success message or additional information.
        error: Optional error message if the action failed.
    """

    action: Action
    success: bool
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success
