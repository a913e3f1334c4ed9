"""Unit tests for backup command."""

from pathlib import Path

import pytest
from crateback.cli.main import app
from crateback.core.manifest import load_manifest
from typer.testing import CliRunner

runner = CliRunner()


class TestBackupCommand:
    """Tests for crateback backup."""

    def test_writes_default_backup(self, cargo_env: Path, isolated_dirs: Path) -> None:
        """Installed packages are written to the default backup path."""
        result = runner.invoke(app, ["backup"])

        assert result.exit_code == 0
        assert "Backed up 4 package(s)" in result.output
        manifest = load_manifest(isolated_dirs / ".config" / "crateback" / "crateback.json")
        assert manifest.names == ["cargo-edit", "mytool", "ripgrep", "serde-cli"]

    def test_custom_output(self, cargo_env: Path, tmp_path: Path) -> None:
        """--output selects the destination."""
        output = tmp_path / "out" / "crates.json"
        result = runner.invoke(app, ["backup", "-o", str(output)])

        assert result.exit_code == 0
        assert load_manifest(output).package_count == 4

    def test_captures_broken_packages_as_registered(self, cargo_env: Path, tmp_path: Path) -> None:
        """Packages with missing binaries are still backed up."""
        output = tmp_path / "crates.json"
        runner.invoke(app, ["backup", "-o", str(output)])
        assert "serde-cli" in load_manifest(output).names

    def test_missing_registry(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing Cargo registry is fatal."""
        monkeypatch.setenv("CARGO_HOME", str(tmp_path / "nowhere"))
        result = runner.invoke(app, ["backup"])

        assert result.exit_code == 1
        assert "Cannot read local package state" in result.output

    def test_empty_registry_warns(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty registry still writes an empty backup."""
        home = tmp_path / "cargo"
        home.mkdir()
        (home / ".crates2.json").write_text('{"installs": {}}', encoding="utf-8")
        monkeypatch.setenv("CARGO_HOME", str(home))
        output = tmp_path / "crates.json"

        result = runner.invoke(app, ["backup", "-o", str(output)])

        assert result.exit_code == 0
        assert "No installed packages found" in result.output
        assert load_manifest(output).package_count == 0
