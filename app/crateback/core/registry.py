"""Local state reader for Cargo's installed-package registry.

Parses ``$CARGO_HOME/.crates2.json`` into a LocalSnapshot. The file's
schema is owned by Cargo; anything this module does not recognise is
reported as a StateReadError instead of being skipped.

Example registry content::

    {"installs": {
        "ripgrep 14.1.0 (registry+https://github.com/rust-lang/crates.io-index)": {
            "version_req": null, "bins": ["rg"], "features": [],
            "all_features": false, "no_default_features": false,
            "profile": "release", "target": "x86_64-unknown-linux-gnu",
            "rustc": "rustc 1.79.0 (129f3b996 2024-06-10)"
        }
    }}
"""

import json
import logging
import socket
from datetime import UTC, datetime
from pathlib import Path
from urllib.parse import parse_qs, unquote, urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crateback.models.manifest import BackupManifest, ManifestMeta
from crateback.models.package import (
    DEFAULT_PROFILE,
    GitSource,
    PackageRecord,
    PathSource,
    RegistrySource,
)
from crateback.models.snapshot import LocalSnapshot

logger = logging.getLogger(__name__)

# Index URLs that denote crates.io itself
DEFAULT_INDEXES: frozenset[str] = frozenset(
    {
        "https://github.com/rust-lang/crates.io-index",
        "https://index.crates.io/",
        "https://index.crates.io",
    }
)


class StateReadError(Exception):
    """Raised when the installed-package registry cannot be read or parsed."""


class _InstallInfo(BaseModel):
    """One value of the ``installs`` mapping in .crates2.json.

    Unknown keys (e.g. ``rustc``) are ignored; known keys must have the
    expected types.
    """

    model_config = ConfigDict(extra="ignore", strict=True)

    version_req: str | None = None
    bins: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    all_features: bool = False
    no_default_features: bool = False
    profile: str = DEFAULT_PROFILE
    target: str | None = None


def parse_package_id(
    package_id: str, version_req: str | None = None
) -> tuple[str, str, RegistrySource | PathSource | GitSource]:
    """Split a Cargo package id into name, version and source.

    Args:
        package_id: Key of the installs mapping, e.g.
            ``"foo 0.1.0 (path+file:///home/user/foo)"``.
        version_req: Version requirement recorded for registry installs.

    Returns:
        Tuple of (name, version, source).

    Raises:
        StateReadError: If the id is malformed or uses an unknown source scheme.
    """
    parts = package_id.split(" ", 2)
    if len(parts) != 3 or not parts[2].startswith("(") or not parts[2].endswith(")"):
        raise StateReadError(f"Malformed package id: {package_id!r}")

    name, version, url = parts[0], parts[1], parts[2][1:-1]
    scheme, sep, location = url.partition("+")
    if not sep or not location:
        raise StateReadError(f"Malformed source in package id: {package_id!r}")

    source: RegistrySource | PathSource | GitSource
    match scheme:
        case "registry" | "sparse":
            if location in DEFAULT_INDEXES:
                index = None
            else:
                # Cargo only accepts sparse indexes with their scheme prefix
                index = url if scheme == "sparse" else location
            source = RegistrySource(version_req=version_req, index=index)
        case "path":
            source = PathSource(directory=unquote(urlsplit(location).path))
        case "git":
            source = _parse_git_location(location)
        case _:
            raise StateReadError(f"Unknown source scheme {scheme!r} in package id: {package_id!r}")

    return name, version, source


def _parse_git_location(location: str) -> GitSource:
    """Parse ``<url>[?branch=|tag=|rev=<ref>][#<commit>]`` into a GitSource."""
    without_fragment, _, commit = location.partition("#")
    url, _, query = without_fragment.partition("?")
    params = parse_qs(query)

    for kind in ("branch", "tag", "rev"):
        if kind in params:
            return GitSource(url=url, ref=params[kind][0], ref_kind=kind)  # type: ignore[arg-type]

    if commit:
        return GitSource(url=url, ref=commit, ref_kind="rev")
    return GitSource(url=url)


def read_snapshot(crates_path: Path) -> LocalSnapshot:
    """Read Cargo's registry file into an unvalidated LocalSnapshot.

    Every registered package is extracted exactly as declared; no
    inference or reconciliation happens here.

    Args:
        crates_path: Path to .crates2.json.

    Returns:
        LocalSnapshot with one entry per installed package.

    Raises:
        StateReadError: If the file is absent, unreadable or not in the
            expected format.
    """
    if not crates_path.exists():
        raise StateReadError(f"Cargo registry not found: {crates_path}")

    try:
        with open(crates_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise StateReadError(f"Invalid JSON in {crates_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise StateReadError(f"Failed to read {crates_path}: {e}") from e

    installs = data.get("installs") if isinstance(data, dict) else None
    if not isinstance(installs, dict):
        raise StateReadError(f"Missing 'installs' mapping in {crates_path}")

    records: list[PackageRecord] = []
    for package_id, raw in installs.items():
        try:
            info = _InstallInfo.model_validate(raw)
        except ValidationError as e:
            raise StateReadError(f"Unexpected install entry for {package_id!r}: {e}") from e

        name, version, source = parse_package_id(package_id, info.version_req)

        try:
            record = PackageRecord(
                name=name,
                version=version,
                source=source,
                profile=info.profile,
                target=info.target,
                features=frozenset(info.features),
                all_features=info.all_features,
                no_default_features=info.no_default_features,
                binaries=tuple(info.bins),
            )
        except ValidationError as e:
            raise StateReadError(f"Invalid package {package_id!r}: {e}") from e
        records.append(record)

    try:
        snapshot = LocalSnapshot.from_records(records)
    except ValueError as e:
        raise StateReadError(str(e)) from e

    logger.debug("Read %d installed package(s) from %s", len(snapshot), crates_path)
    return snapshot


def capture_manifest(snapshot: LocalSnapshot, hostname: str | None = None) -> BackupManifest:
    """Capture a backup manifest from the local snapshot.

    Args:
        snapshot: Packages read from the local registry.
        hostname: Machine name stored in the manifest. Defaults to the
            current hostname.

    Returns:
        BackupManifest with packages sorted by name.
    """
    records = sorted(snapshot.records, key=lambda r: r.name)
    return BackupManifest(
        meta=ManifestMeta(
            created=datetime.now(UTC),
            hostname=hostname if hostname is not None else socket.gethostname(),
        ),
        packages=tuple(records),
    )
