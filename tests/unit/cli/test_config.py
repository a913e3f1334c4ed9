"""Unit tests for config command."""

import json
from pathlib import Path

import pytest
from crateback.cli.main import app
from crateback.core.config import load_settings
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigShow:
    """Tests for crateback config show."""

    def test_json_defaults(self, isolated_dirs: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults are resolved in JSON output."""
        monkeypatch.setenv("HOME", str(isolated_dirs))

        result = runner.invoke(app, ["config", "show", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        config_dir = isolated_dirs / ".config" / "crateback"
        assert data["cargo_home"] == str(isolated_dirs / ".cargo")
        assert data["backup_path"] == str(config_dir / "crateback.json")
        assert data["gist_id"] is None
        assert data["token_present"] is False

    def test_token_presence(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Only the presence of the token is shown."""
        monkeypatch.setenv("GITHUB_TOKEN", "secret")

        result = runner.invoke(app, ["config", "show", "--json"])

        assert json.loads(result.stdout)["token_present"] is True
        assert "secret" not in result.stdout

    def test_table(self) -> None:
        """The table lists the settings."""
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "gist_filename" in result.stdout

    def test_invalid_config(self, isolated_dirs: Path) -> None:
        """A broken config file is fatal."""
        path = isolated_dirs / ".config" / "crateback" / "config.toml"
        path.parent.mkdir(parents=True)
        path.write_text("gist_id = [", encoding="utf-8")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1


class TestConfigSet:
    """Tests for crateback config set."""

    def test_set_value(self) -> None:
        """A valid value is persisted."""
        result = runner.invoke(app, ["config", "set", "gist_id", "abc123"])

        assert result.exit_code == 0
        assert load_settings().gist_id == "abc123"

    def test_unset_value(self) -> None:
        """An empty value unsets the key."""
        runner.invoke(app, ["config", "set", "gist_id", "abc123"])
        runner.invoke(app, ["config", "set", "gist_id", ""])
        assert load_settings().gist_id is None

    def test_unknown_key(self) -> None:
        """Unknown keys are rejected."""
        result = runner.invoke(app, ["config", "set", "colour", "blue"])

        assert result.exit_code == 1
        assert "Unknown setting" in result.output

    def test_invalid_value(self) -> None:
        """Values are validated before saving."""
        result = runner.invoke(app, ["config", "set", "validation_workers", "0"])

        assert result.exit_code == 1
        assert load_settings().validation_workers == 8
