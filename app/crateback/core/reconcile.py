"""Reconciliation engine comparing a backup with the local state.

This module classifies every package in the union of backup manifest
and local snapshot into exactly one action, applies skip flags and
orders the resulting plan for execution.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from crateback.core.registry import read_snapshot
from crateback.core.validator import validate_snapshot
from crateback.models.action import (
    ACTION_ORDER,
    Action,
    ActionPlan,
    ActionType,
    DiffReport,
    SkipFlags,
)

if TYPE_CHECKING:
    from crateback.models.manifest import BackupManifest
    from crateback.models.snapshot import LocalSnapshot

logger = logging.getLogger(__name__)

REASON_NOT_INSTALLED = "Not installed"
REASON_BINARIES_MISSING = "Registered but binaries missing"
REASON_NOT_IN_BACKUP = "Not in backup"


def classify(manifest: BackupManifest, snapshot: LocalSnapshot) -> list[Action]:
    """Classify every package in manifest and snapshot.

    Each manifest package becomes exactly one INSTALL, UPDATE or NOOP;
    each local package absent from the manifest becomes one REMOVE.
    A registered package whose binaries are not all present is always
    an INSTALL, whatever its metadata says.

    Args:
        manifest: Desired package state.
        snapshot: Validated local package state.

    Returns:
        Unfiltered actions ordered REMOVE, INSTALL, UPDATE, NOOP.
    """
    wanted = set(manifest.names)
    by_type: dict[ActionType, list[Action]] = {t: [] for t in ACTION_ORDER}

    for entry in snapshot:
        if entry.record.name not in wanted:
            by_type[ActionType.REMOVE].append(
                Action(
                    action_type=ActionType.REMOVE,
                    name=entry.record.name,
                    current=entry.record,
                    reason=REASON_NOT_IN_BACKUP,
                )
            )

    for record in manifest.packages:
        entry = snapshot.get(record.name)

        if entry is None:
            action = Action(
                action_type=ActionType.INSTALL,
                name=record.name,
                record=record,
                reason=REASON_NOT_INSTALLED,
            )
        elif not entry.is_usable:
            logger.info("%s is registered but its binaries are missing, reinstalling", record.name)
            action = Action(
                action_type=ActionType.INSTALL,
                name=record.name,
                record=record,
                current=entry.record,
                reason=REASON_BINARIES_MISSING,
            )
        elif changed := record.differences(entry.record):
            action = Action(
                action_type=ActionType.UPDATE,
                name=record.name,
                record=record,
                current=entry.record,
                reason=f"Changed: {', '.join(changed)}",
            )
        else:
            action = Action(
                action_type=ActionType.NOOP,
                name=record.name,
                record=record,
                current=entry.record,
            )

        by_type[action.action_type].append(action)

    return [action for action_type in ACTION_ORDER for action in by_type[action_type]]


def reconcile(
    manifest: BackupManifest,
    snapshot: LocalSnapshot,
    skip: SkipFlags | None = None,
) -> ActionPlan:
    """Compute the action plan bringing the local state in line with a backup.

    Classification happens first; skip flags then drop whole categories
    from the plan. The report always reflects the unfiltered
    classification.

    Args:
        manifest: Desired package state.
        snapshot: Validated local package state.
        skip: Categories to leave out of the executable plan.

    Returns:
        ActionPlan ordered REMOVE, INSTALL, UPDATE, NOOP.
    """
    skip = skip or SkipFlags()

    if not snapshot.is_validated:
        logger.warning("Reconciling against an unvalidated snapshot; unvalidated entries reinstall")

    classified = classify(manifest, snapshot)
    report = DiffReport.from_actions(classified)
    actions = tuple(a for a in classified if skip.allows(a.action_type))

    logger.debug(
        "Reconciled %d backup package(s) against %d local package(s): %s",
        manifest.package_count,
        len(snapshot),
        report.to_dict(),
    )

    return ActionPlan(actions=actions, report=report, skip=skip)


class ReconciliationEngine:
    """Reads and validates local state, then reconciles it with a backup.

    Example:
        >>> from crateback.core.reconcile import ReconciliationEngine
        >>> from crateback.core.manifest import load_manifest
        >>> engine = ReconciliationEngine(crates_path, bin_dir)
        >>> plan = engine.run(load_manifest(path))
        >>> if plan.is_in_sync:
        ...     print("Already in sync")
    """

    def __init__(
        self,
        crates_path: Path,
        bin_dir: Path,
        max_workers: int | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            crates_path: Cargo's .crates2.json file.
            bin_dir: Cargo bin directory.
            max_workers: Thread pool size for binary validation.
        """
        self.crates_path = crates_path
        self.bin_dir = bin_dir
        self.max_workers = max_workers

    def load_snapshot(self) -> LocalSnapshot:
        """Read and validate the local snapshot.

        Raises:
            StateReadError: If the registry cannot be read.
            ValidationIOError: If the bin directory cannot be read.
        """
        snapshot = read_snapshot(self.crates_path)
        return validate_snapshot(snapshot, self.bin_dir, self.max_workers)

    def run(self, manifest: BackupManifest, skip: SkipFlags | None = None) -> ActionPlan:
        """Reconcile a manifest against freshly read local state.

        Raises:
            StateReadError: If the registry cannot be read.
            ValidationIOError: If the bin directory cannot be read.
        """
        return reconcile(manifest, self.load_snapshot(), skip)
