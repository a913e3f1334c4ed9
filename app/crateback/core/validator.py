"""Binary validation for installed packages.

A package registered in .crates2.json is only trusted as installed when
every binary it declares exists in the Cargo bin directory. Checks are
independent per package and run on a thread pool.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from crateback.models.package import PackageRecord
from crateback.models.snapshot import LocalSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class ValidationIOError(Exception):
    """Raised when the binaries directory itself cannot be read."""


def binary_exists(bin_dir: Path, binary: str) -> bool:
    """Check that a single binary file exists.

    I/O errors count as absent so that an unreadable binary triggers a
    reinstall rather than aborting the run.
    """
    try:
        return (bin_dir / binary).is_file()
    except OSError as e:
        logger.debug("Treating %s as missing: %s", bin_dir / binary, e)
        return False


def binaries_present(record: PackageRecord, bin_dir: Path) -> bool:
    """Check that every binary declared by a package exists.

    A package declaring no binaries is never considered present: Cargo
    only installs packages with binaries, so such an entry is stale.

    Args:
        record: Package whose binaries to check.
        bin_dir: Cargo bin directory.

    Returns:
        True only if all declared binaries exist.
    """
    if not record.binaries:
        return False
    return all(binary_exists(bin_dir, binary) for binary in record.binaries)


def _check_bin_dir(bin_dir: Path) -> None:
    """Verify the bin directory can be listed.

    Raises:
        ValidationIOError: If the directory is missing or unreadable.
    """
    if not bin_dir.is_dir():
        raise ValidationIOError(f"Cargo bin directory not found: {bin_dir}")
    try:
        with os.scandir(bin_dir) as it:
            next(it, None)
    except OSError as e:
        raise ValidationIOError(f"Cannot read Cargo bin directory {bin_dir}: {e}") from e


def validate_snapshot(
    snapshot: LocalSnapshot,
    bin_dir: Path,
    max_workers: int | None = None,
) -> LocalSnapshot:
    """Annotate every snapshot entry with its binary presence.

    Args:
        snapshot: Snapshot read from the registry.
        bin_dir: Cargo bin directory.
        max_workers: Thread pool size. The result does not depend on it.

    Returns:
        New snapshot with ``binaries_present`` set on every entry.

    Raises:
        ValidationIOError: If the bin directory is missing or unreadable.
    """
    _check_bin_dir(bin_dir)

    records = snapshot.records
    if not records:
        return snapshot.validated({})

    workers = max(1, min(max_workers or DEFAULT_MAX_WORKERS, len(records)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = pool.map(lambda r: binaries_present(r, bin_dir), records)
        presence = {record.name: present for record, present in zip(records, results, strict=True)}

    validated = snapshot.validated(presence)
    for name in validated.missing_binaries:
        logger.info("Binaries missing for %s", name)
    return validated
