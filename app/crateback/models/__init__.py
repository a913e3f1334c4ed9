"""Data models for crateback.

This module exports the core data structures used throughout the application.
"""

from crateback.models.action import (
    Action,
    ActionPlan,
    ActionResult,
    ActionType,
    DiffReport,
    Invocation,
    SkipFlags,
)
from crateback.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)
from crateback.models.manifest import BackupManifest, ManifestMeta
from crateback.models.package import GitSource, PackageRecord, PathSource, RegistrySource
from crateback.models.snapshot import LocalSnapshot, SnapshotEntry

__all__ = [
    "Action",
    "ActionPlan",
    "ActionResult",
    "ActionType",
    "BackupManifest",
    "DiffReport",
    "GitSource",
    "HistoryActionType",
    "HistoryEntry",
    "HistoryItem",
    "Invocation",
    "LocalSnapshot",
    "ManifestMeta",
    "PackageRecord",
    "PathSource",
    "RegistrySource",
    "SkipFlags",
    "SnapshotEntry",
    "create_history_entry",
]
