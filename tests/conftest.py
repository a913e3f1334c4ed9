"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
from pathlib import Path
from typing import Any

import pytest

CRATES_IO = "registry+https://github.com/rust-lang/crates.io-index"


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories and CARGO_HOME into the test's tmp_path."""
    home = tmp_path / "home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / ".local" / "state"))
    monkeypatch.delenv("CARGO_HOME", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return home


@pytest.fixture
def crates2_data() -> dict[str, Any]:
    """Sample .crates2.json content covering every source kind."""
    return {
        "installs": {
            f"ripgrep 14.1.0 ({CRATES_IO})": {
                "version_req": None,
                "bins": ["rg"],
                "features": [],
                "all_features": False,
                "no_default_features": False,
                "profile": "release",
                "target": "x86_64-unknown-linux-gnu",
                "rustc": "rustc 1.79.0 (129f3b996 2024-06-10)",
            },
            f"serde-cli 0.3.1 ({CRATES_IO})": {
                "version_req": "^0.3",
                "bins": ["serde"],
                "features": [],
                "all_features": False,
                "no_default_features": False,
                "profile": "release",
                "target": "x86_64-unknown-linux-gnu",
            },
            "mytool 0.1.0 (path+file:///home/user/src/mytool)": {
                "version_req": None,
                "bins": ["mytool"],
                "features": ["fast", "cli"],
                "all_features": False,
                "no_default_features": True,
                "profile": "dev",
                "target": "x86_64-unknown-linux-gnu",
            },
            "cargo-edit 0.12.2 (git+https://github.com/killercup/cargo-edit?tag=v0.12.2#5a1e4b3)": {
                "version_req": None,
                "bins": ["cargo-add", "cargo-rm"],
                "features": [],
                "all_features": False,
                "no_default_features": False,
                "profile": "release",
                "target": "x86_64-unknown-linux-gnu",
            },
        }
    }


@pytest.fixture
def cargo_home(tmp_path: Path, crates2_data: dict[str, Any]) -> Path:
    """Cargo home with a registry file and a bin directory.

    Every declared binary exists except ``serde`` (package serde-cli).
    """
    home = tmp_path / "cargo"
    bin_dir = home / "bin"
    bin_dir.mkdir(parents=True)
    (home / ".crates2.json").write_text(json.dumps(crates2_data), encoding="utf-8")
    for binary in ("rg", "mytool", "cargo-add", "cargo-rm"):
        (bin_dir / binary).write_text("#!/bin/sh\n", encoding="utf-8")
    return home


@pytest.fixture
def cargo_env(cargo_home: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Make the sample Cargo home the one commands operate on."""
    monkeypatch.setenv("CARGO_HOME", str(cargo_home))
    return cargo_home
