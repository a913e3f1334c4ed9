"""State management for history tracking.

This module provides the StateManager class for persisting and querying
history entries in a JSONL file format.
"""

import json
import logging
from pathlib import Path

from crateback.core.paths import ensure_dir, get_history_path, get_state_dir
from crateback.models.history import HistoryEntry

logger = logging.getLogger(__name__)


class StateManager:
    """Manages history state in a JSONL file.

    Storage location: ~/.local/state/crateback/history.jsonl

    Each line is a complete JSON object representing a HistoryEntry,
    which keeps writes append-only.
    """

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/crateback
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        """Path to the history.jsonl file."""
        return get_history_path(self._state_dir)

    def record_action(self, entry: HistoryEntry) -> None:
        """Append an entry to the history file.

        Creates the file and parent directories if they don't exist.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        ensure_dir(self._state_dir, "state")

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(entry.to_json_line() + "\n")
            f.flush()

    def get_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Read history entries, newest first.

        Corrupt lines are logged and skipped.

        Args:
            limit: Maximum number of entries to return. If None, returns all.

        Returns:
            List of HistoryEntry, newest first. Empty if no history exists.
        """
        if not self.history_path.exists():
            return []

        entries: list[HistoryEntry] = []

        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entries.append(HistoryEntry.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt history line %d: %s", line_num, str(e))

        entries.reverse()

        if limit is not None:
            return entries[:limit]

        return entries
