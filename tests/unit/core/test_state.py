"""Unit tests for core/state.py."""

from pathlib import Path
from unittest.mock import patch

import pytest
from crateback.core.state import StateManager
from crateback.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)


def _entry(
    name: str, action_type: HistoryActionType = HistoryActionType.INSTALL
) -> HistoryEntry:
    return create_history_entry(action_type, [HistoryItem(name=name)])


class TestStateManager:
    """Tests for StateManager."""

    def test_default_location(self, isolated_dirs: Path) -> None:
        """History lives under the XDG state directory."""
        expected = isolated_dirs / ".local" / "state" / "crateback" / "history.jsonl"
        assert StateManager().history_path == expected

    def test_no_history(self, tmp_path: Path) -> None:
        """Missing history reads as empty."""
        assert StateManager(tmp_path).get_history() == []

    def test_record_creates_directories(self, tmp_path: Path) -> None:
        """Recording creates the state directory."""
        state = StateManager(tmp_path / "a" / "b")
        state.record_action(_entry("bat"))
        assert state.history_path.exists()

    def test_record_unwritable_state_dir(self, tmp_path: Path) -> None:
        """An uncreatable state directory raises RuntimeError."""
        state = StateManager(tmp_path / "state")
        with (
            patch.object(Path, "mkdir", side_effect=PermissionError("denied")),
            pytest.raises(RuntimeError, match="Cannot create state directory"),
        ):
            state.record_action(_entry("bat"))
        assert not state.history_path.exists()

    def test_newest_first(self, tmp_path: Path) -> None:
        """Entries are returned newest first."""
        state = StateManager(tmp_path)
        for name in ("first", "second", "third"):
            state.record_action(_entry(name))

        names = [e.items[0].name for e in state.get_history()]
        assert names == ["third", "second", "first"]

    def test_limit(self, tmp_path: Path) -> None:
        """limit caps the number of entries."""
        state = StateManager(tmp_path)
        for name in ("first", "second", "third"):
            state.record_action(_entry(name))
        assert [e.items[0].name for e in state.get_history(limit=2)] == ["third", "second"]

    def test_corrupt_lines_skipped(self, tmp_path: Path) -> None:
        """Corrupt and blank lines are skipped."""
        state = StateManager(tmp_path)
        state.record_action(_entry("good"))
        with state.history_path.open("a", encoding="utf-8") as f:
            f.write("{broken\n\n")
            f.write('{"id": "x"}\n')
        state.record_action(_entry("also-good", HistoryActionType.REMOVE))

        history = state.get_history()
        assert [e.items[0].name for e in history] == ["also-good", "good"]
        assert history[0].action_type == HistoryActionType.REMOVE
