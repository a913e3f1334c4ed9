"""Unit tests for history command."""

import json

from crateback.cli.main import app
from crateback.core.state import StateManager
from crateback.models.history import HistoryActionType, HistoryEntry, HistoryItem
from typer.testing import CliRunner

runner = CliRunner()


def _entry(entry_id: str, timestamp: str, *names: str) -> HistoryEntry:
    return HistoryEntry(
        id=entry_id,
        timestamp=timestamp,
        action_type=HistoryActionType.INSTALL,
        items=tuple(HistoryItem(name=n, version="1.0.0") for n in names),
        metadata={"command": "restore"},
    )


def _record(*entries: HistoryEntry) -> None:
    manager = StateManager()
    for entry in entries:
        manager.record_action(entry)


class TestHistoryCommand:
    """Tests for crateback history."""

    def test_empty(self) -> None:
        """No history prints a notice."""
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "No history entries found" in result.stdout

    def test_empty_json(self) -> None:
        """No history prints an empty JSON list."""
        result = runner.invoke(app, ["history", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == []

    def test_table(self) -> None:
        """Entries are listed with truncated package names."""
        _record(_entry("aaaa11112222", "2026-03-01T10:00:00+00:00", "a", "b", "c", "d", "e"))

        result = runner.invoke(app, ["history"])

        assert result.exit_code == 0
        assert "aaaa1111" in result.stdout
        assert "(+2 more)" in result.stdout
        assert "install" in result.stdout

    def test_json_newest_first(self) -> None:
        """JSON output lists newest entries first."""
        _record(
            _entry("aaaa11112222", "2026-03-01T10:00:00+00:00", "ripgrep"),
            _entry("bbbb11112222", "2026-03-02T10:00:00+00:00", "bat"),
        )

        result = runner.invoke(app, ["history", "--json"])

        data = json.loads(result.stdout)
        assert [e["id"] for e in data] == ["bbbb11112222", "aaaa11112222"]
        assert data[0]["items"][0]["name"] == "bat"

    def test_limit(self) -> None:
        """--limit caps the number of entries."""
        _record(
            _entry("aaaa11112222", "2026-03-01T10:00:00+00:00", "ripgrep"),
            _entry("bbbb11112222", "2026-03-02T10:00:00+00:00", "bat"),
        )

        result = runner.invoke(app, ["history", "--json", "-n", "1"])

        assert [e["id"] for e in json.loads(result.stdout)] == ["bbbb11112222"]

    def test_since(self) -> None:
        """--since drops older entries by calendar day."""
        _record(
            _entry("aaaa11112222", "2026-03-01T10:00:00+00:00", "ripgrep"),
            _entry("bbbb11112222", "2026-03-02T10:00:00+00:00", "bat"),
        )

        result = runner.invoke(app, ["history", "--json", "--since", "2026-03-02"])

        assert [e["id"] for e in json.loads(result.stdout)] == ["bbbb11112222"]

    def test_invalid_since(self) -> None:
        """An unparseable --since is fatal."""
        result = runner.invoke(app, ["history", "--since", "yesterday"])
        assert result.exit_code == 1
        assert "Invalid date format" in result.output
