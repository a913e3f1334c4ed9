"""Local snapshot of installed packages.

A snapshot is read fresh from the Cargo registry on every run and then
annotated with the result of binary validation.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from crateback.models.package import PackageRecord


@dataclass(frozen=True, slots=True)
class SnapshotEntry:
    """A registered package plus its binary validation state.

    Attributes:
        record: Package metadata exactly as declared by the registry.
        binaries_present: True if every declared binary exists, False if
            any is missing, None if the entry has not been validated.
    """

    record: PackageRecord
    binaries_present: bool | None = None

    @property
    def is_usable(self) -> bool:
        """Check if the package can be trusted as installed.

        Unvalidated entries are never trusted.
        """
        return self.binaries_present is True


@dataclass(frozen=True, slots=True)
class LocalSnapshot:
    """Mapping of package name to snapshot entry.

    Entry order follows the order the registry listed the packages in.
    """

    entries: dict[str, SnapshotEntry] = field(default_factory=lambda: {})

    @classmethod
    def from_records(cls, records: list[PackageRecord]) -> "LocalSnapshot":
        """Build an unvalidated snapshot from package records.

        Raises:
            ValueError: If two records share a name.
        """
        entries: dict[str, SnapshotEntry] = {}
        for record in records:
            if record.name in entries:
                msg = f"Duplicate package in local state: {record.name}"
                raise ValueError(msg)
            entries[record.name] = SnapshotEntry(record=record)
        return cls(entries=entries)

    def validated(self, presence: Mapping[str, bool]) -> "LocalSnapshot":
        """Return a copy annotated with binary presence per package.

        Packages absent from ``presence`` keep their current state.
        """
        return LocalSnapshot(
            entries={
                name: SnapshotEntry(
                    record=entry.record,
                    binaries_present=presence.get(name, entry.binaries_present),
                )
                for name, entry in self.entries.items()
            }
        )

    @property
    def is_validated(self) -> bool:
        """Check if every entry carries a validation result."""
        return all(e.binaries_present is not None for e in self.entries.values())

    @property
    def records(self) -> list[PackageRecord]:
        """Package records in snapshot order."""
        return [entry.record for entry in self.entries.values()]

    @property
    def missing_binaries(self) -> list[str]:
        """Names of registered packages whose binaries are not all present."""
        return [name for name, entry in self.entries.items() if entry.binaries_present is False]

    def get(self, name: str) -> SnapshotEntry | None:
        """Look up an entry by package name."""
        return self.entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[SnapshotEntry]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)
