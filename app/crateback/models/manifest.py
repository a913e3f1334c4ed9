"""Backup manifest models.

This module defines the Pydantic models representing a backup file:
an ordered, immutable list of packages captured at one point in time.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from crateback.models.package import PackageRecord

MANIFEST_SCHEMA_VERSION = "1"


class ManifestMeta(BaseModel):
    """Metadata section of the backup manifest.

    Attributes:
        version: Manifest schema version.
        created: Timestamp when the backup was captured.
        hostname: Machine the backup was captured on, if known.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: Annotated[str, Field(description="Manifest schema version")] = (
        MANIFEST_SCHEMA_VERSION
    )
    created: Annotated[datetime, Field(description="Timestamp when backup was captured")]
    hostname: Annotated[str | None, Field(description="Source machine")] = None


class BackupManifest(BaseModel):
    """Captured set of globally installed packages.

    Package order is preserved from the file and drives the order of
    install and update actions during reconciliation.

    Attributes:
        meta: Metadata section with schema version and capture time.
        packages: Ordered package records, names unique.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    meta: Annotated[ManifestMeta, Field(description="Manifest metadata")]
    packages: Annotated[
        tuple[PackageRecord, ...],
        Field(default_factory=tuple, description="Backed-up packages"),
    ]

    @model_validator(mode="after")
    def validate_unique_names(self) -> "BackupManifest":
        """Validate that no package name appears twice."""
        seen: set[str] = set()
        duplicates: set[str] = set()
        for record in self.packages:
            if record.name in seen:
                duplicates.add(record.name)
            seen.add(record.name)
        if duplicates:
            msg = f"Duplicate package names in manifest: {sorted(duplicates)}"
            raise ValueError(msg)
        return self

    @property
    def names(self) -> list[str]:
        """Package names in manifest order."""
        return [record.name for record in self.packages]

    @property
    def package_count(self) -> int:
        """Total number of packages in the manifest."""
        return len(self.packages)
