"""Unit tests for history models."""

import json

import pytest
from crateback.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)


class TestHistoryItem:
    """Tests for HistoryItem."""

    def test_empty_name_rejected(self) -> None:
        """Items need a package name."""
        with pytest.raises(ValueError, match="cannot be empty"):
            HistoryItem(name="")

    def test_to_dict_omits_unset(self) -> None:
        """Unset optional fields are not serialized."""
        assert HistoryItem(name="bat").to_dict() == {"name": "bat"}
        assert HistoryItem(name="bat", version="0.24.0", source="registry").to_dict() == {
            "name": "bat",
            "version": "0.24.0",
            "source": "registry",
        }

    def test_from_dict(self) -> None:
        """from_dict restores all fields."""
        item = HistoryItem.from_dict({"name": "bat", "version": "0.24.0", "source": "git"})
        assert item == HistoryItem(name="bat", version="0.24.0", source="git")


class TestHistoryEntry:
    """Tests for HistoryEntry."""

    def _entry(self) -> HistoryEntry:
        return HistoryEntry(
            id="abc123456789",
            timestamp="2026-01-26T14:30:00+00:00",
            action_type=HistoryActionType.INSTALL,
            items=(HistoryItem(name="bat", version="0.24.0", source="registry"),),
            metadata={"command": "crateback restore"},
        )

    def test_requires_items(self) -> None:
        """Entries need at least one item."""
        with pytest.raises(ValueError, match="at least one item"):
            HistoryEntry(
                id="abc",
                timestamp="2026-01-26T14:30:00+00:00",
                action_type=HistoryActionType.REMOVE,
                items=(),
            )

    def test_requires_id(self) -> None:
        """Entries need an ID."""
        with pytest.raises(ValueError, match="ID cannot be empty"):
            HistoryEntry(
                id="",
                timestamp="2026-01-26T14:30:00+00:00",
                action_type=HistoryActionType.REMOVE,
                items=(HistoryItem(name="bat"),),
            )

    def test_json_line_round_trip(self) -> None:
        """An entry survives JSONL serialization."""
        entry = self._entry()
        line = entry.to_json_line()
        assert "\n" not in line
        assert HistoryEntry.from_json_line(line) == entry

    def test_from_dict_invalid_action_type(self) -> None:
        """Unknown action types are rejected."""
        data = self._entry().to_dict()
        data["action_type"] = "purge"
        with pytest.raises(ValueError):
            HistoryEntry.from_dict(data)

    def test_from_json_line_invalid_json(self) -> None:
        """Malformed lines raise JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            HistoryEntry.from_json_line("{not json")


class TestCreateHistoryEntry:
    """Tests for create_history_entry."""

    def test_generates_id_and_timestamp(self) -> None:
        """A 12-character ID and a timezone-aware timestamp are generated."""
        entry = create_history_entry(HistoryActionType.UPDATE, [HistoryItem(name="bat")])
        assert len(entry.id) == 12
        assert entry.timestamp.endswith("+00:00")
        assert entry.metadata == {}

    def test_empty_items_rejected(self) -> None:
        """At least one item is required."""
        with pytest.raises(ValueError, match="no items"):
            create_history_entry(HistoryActionType.INSTALL, [])
