"""Package models for installed and backed-up crates.

This module defines the PackageRecord structure shared by backup
manifests and local snapshots, together with the tagged source variant
(registry, path or git) each record was installed from.
"""

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# SemVer 2.0 as produced by Cargo (pre-release and build metadata allowed)
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)

DEFAULT_PROFILE = "release"


class RegistrySource(BaseModel):
    """Package installed from a crate registry.

    Attributes:
        version_req: Version requirement passed at install time (e.g. "=0.5.3").
        index: Registry index URL, or None for the default crates.io index.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["registry"] = "registry"
    version_req: str | None = None
    index: str | None = None


class PathSource(BaseModel):
    """Package installed from a local directory."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["path"] = "path"
    directory: str


GitRefKind = Literal["branch", "tag", "rev"]


class GitSource(BaseModel):
    """Package installed from a git repository.

    Attributes:
        url: Repository URL.
        ref: Branch, tag or revision the install was pinned to.
        ref_kind: What kind of git reference ``ref`` names.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["git"] = "git"
    url: str
    ref: str | None = None
    ref_kind: GitRefKind = "rev"


PackageSource = Annotated[
    RegistrySource | PathSource | GitSource,
    Field(discriminator="kind"),
]

# Fields compared when deciding whether an installed package needs an update
COMPARED_FIELDS: tuple[str, ...] = (
    "version",
    "source",
    "profile",
    "target",
    "features",
    "all_features",
    "no_default_features",
)


class PackageRecord(BaseModel):
    """A single installed (or to-be-installed) package.

    Records are immutable. The same structure is used for manifest
    entries and for packages read from the local Cargo registry.

    Attributes:
        name: Crate name, unique within a manifest or snapshot.
        version: Installed version, may be absent for git/path sources.
        source: Where the package was installed from.
        profile: Build profile ("release", "debug" or a custom profile).
        target: Target triple, or None for the host target.
        features: Enabled feature names (order irrelevant).
        all_features: Whether --all-features was used.
        no_default_features: Whether --no-default-features was used.
        binaries: Binary names expected in the Cargo bin directory.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Annotated[str, Field(min_length=1, description="Crate name")]
    version: Annotated[str | None, Field(description="Installed version")] = None
    source: PackageSource = Field(default_factory=RegistrySource, description="Install source")
    profile: Annotated[str, Field(description="Build profile")] = DEFAULT_PROFILE
    target: Annotated[str | None, Field(description="Target triple")] = None
    features: Annotated[frozenset[str], Field(description="Enabled features")] = frozenset()
    all_features: bool = False
    no_default_features: bool = False
    binaries: Annotated[tuple[str, ...], Field(description="Installed binaries")] = ()

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str | None) -> str | None:
        """Validate that the version is a SemVer string when present."""
        if v is not None and not _SEMVER_RE.match(v):
            msg = f"Invalid semantic version: {v!r}"
            raise ValueError(msg)
        return v

    @field_serializer("features")
    def serialize_features(self, features: frozenset[str]) -> list[str]:
        """Serialize features as a sorted list for stable output."""
        return sorted(features)

    @property
    def source_kind(self) -> str:
        """Short source label ("registry", "path" or "git")."""
        return self.source.kind

    @property
    def source_display(self) -> str:
        """Human-readable description of the install source."""
        match self.source:
            case RegistrySource(index=None):
                return "crates.io"
            case RegistrySource(index=index):
                return f"registry {index}"
            case PathSource(directory=directory):
                return f"path {directory}"
            case GitSource(url=url, ref=None):
                return f"git {url}"
            case GitSource(url=url, ref=ref):
                return f"git {url}#{ref}"

    def differences(self, other: "PackageRecord") -> tuple[str, ...]:
        """Name the compared fields whose values differ from ``other``.

        Binaries are not compared; their presence on disk is checked
        separately by the binary validator.

        Args:
            other: Record to compare against.

        Returns:
            Tuple of differing field names, empty if the records match.
        """
        return tuple(
            name for name in COMPARED_FIELDS if getattr(self, name) != getattr(other, name)
        )
