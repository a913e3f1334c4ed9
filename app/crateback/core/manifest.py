"""Backup manifest file I/O operations.

This module provides functions for loading and saving backup manifests
in JSON format with validation using Pydantic models.
"""

import json
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from pydantic import ValidationError

from crateback.core.paths import get_default_backup_path
from crateback.models.manifest import BackupManifest


class ManifestError(Exception):
    """Base exception for backup manifest errors."""


class ManifestReadError(ManifestError):
    """Raised when a backup cannot be loaded."""


class ManifestNotFoundError(ManifestReadError):
    """Raised when the backup file is not found."""


class ManifestParseError(ManifestReadError):
    """Raised when the backup file is not valid JSON."""


class ManifestValidationError(ManifestReadError):
    """Raised when the backup content doesn't match the schema."""


class ManifestWriteError(ManifestError):
    """Raised when a backup cannot be written."""


def parse_manifest(content: bytes | str) -> BackupManifest:
    """Parse and validate manifest content.

    Args:
        content: Raw JSON document, e.g. pulled from a gist.

    Returns:
        Validated BackupManifest.

    Raises:
        ManifestParseError: If the content is not valid JSON.
        ManifestValidationError: If the content doesn't match the schema.
    """
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestParseError(f"Invalid JSON: {e}") from e

    try:
        return BackupManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestValidationError(f"Invalid manifest content: {e}") from e


def load_manifest(path: Path | None = None) -> BackupManifest:
    """Load and validate a manifest from a JSON file.

    Args:
        path: Path to the backup file. If None, uses the default backup path.

    Returns:
        Validated BackupManifest.

    Raises:
        ManifestNotFoundError: If the file doesn't exist.
        ManifestParseError: If the JSON syntax is invalid.
        ManifestValidationError: If the content doesn't match the schema.
        ManifestReadError: If the file cannot be read.
    """
    manifest_path = path or get_default_backup_path()

    if not manifest_path.exists():
        raise ManifestNotFoundError(f"Backup not found: {manifest_path}")

    try:
        content = manifest_path.read_bytes()
    except OSError as e:
        raise ManifestReadError(f"Failed to read backup: {e}") from e

    return parse_manifest(content)


def dump_manifest(manifest: BackupManifest) -> str:
    """Serialize a manifest to stable, human-readable JSON."""
    return json.dumps(manifest.model_dump(mode="json"), indent=2) + "\n"


def save_manifest(manifest: BackupManifest, path: Path | None = None) -> Path:
    """Save a manifest to a JSON file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        manifest: The manifest to save.
        path: Destination. If None, uses the default backup path.

    Returns:
        Path where the manifest was saved.

    Raises:
        ManifestWriteError: If the file cannot be written.
    """
    manifest_path = path or get_default_backup_path()

    tmp_path: Path | None = None
    try:
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=manifest_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(dump_manifest(manifest))
        os.replace(tmp_path, manifest_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ManifestWriteError(f"Failed to write backup: {e}") from e

    return manifest_path
