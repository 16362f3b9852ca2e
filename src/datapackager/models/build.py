"""Build entities.

This module contains entities shared by the build pipeline:
- ProcessingUnit: One configured, enable-flagged processing script
- FingerprintRecord: Object name to digest mapping plus data version
- BuildDecision: Outcome of reconciling old and new fingerprints
- BuildResult: Aggregated outcome of a build run
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from datapackager.models.version import DataVersion


class BuildStatus(Enum):
    """Status of a build run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class DecisionKind(Enum):
    """What the build does with its output."""

    WRITE_UNCHANGED = "write_unchanged"
    WRITE_INCREMENTED = "write_incremented"
    WRITE_AS_IS = "write_as_is"
    FATAL = "fatal"


@dataclass(frozen=True)
class ProcessingUnit:
    """A processing script declared in the build configuration.

    Attributes:
        identifier: File name relative to the data-raw directory
        enabled: Whether the unit runs in this build
        position: Declaration order in the configuration
    """

    identifier: str
    enabled: bool = True
    position: int = 0


@dataclass
class FingerprintRecord:
    """Content digests of the build's objects and the version they were built at.

    Attributes:
        digests: Object name to SHA-256 hex digest
        version: Data version in effect when the record was captured
    """

    digests: dict[str, str]
    version: DataVersion

    def with_version(self, version: DataVersion) -> "FingerprintRecord":
        """Return a copy of this record carrying a different version."""
        return FingerprintRecord(digests=dict(self.digests), version=version)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "DataVersion": str(self.version),
            "digests": dict(sorted(self.digests.items())),
        }


@dataclass(frozen=True)
class BuildDecision:
    """Decision reached by the version reconciler.

    Attributes:
        kind: Which branch of the decision table applied
        version: Version to persist (None only for FATAL)
        reason: Human-readable explanation, logged by the pipeline
    """

    kind: DecisionKind
    version: DataVersion | None = None
    reason: str = ""

    @property
    def writes(self) -> bool:
        """True when the build should persist its output."""
        return self.kind is not DecisionKind.FATAL

    @classmethod
    def unchanged(cls, version: DataVersion, reason: str = "") -> "BuildDecision":
        return cls(DecisionKind.WRITE_UNCHANGED, version, reason)

    @classmethod
    def incremented(cls, version: DataVersion, reason: str = "") -> "BuildDecision":
        return cls(DecisionKind.WRITE_INCREMENTED, version, reason)

    @classmethod
    def as_is(cls, version: DataVersion, reason: str = "") -> "BuildDecision":
        return cls(DecisionKind.WRITE_AS_IS, version, reason)

    @classmethod
    def fatal(cls, reason: str) -> "BuildDecision":
        return cls(DecisionKind.FATAL, None, reason)


@dataclass
class BuildResult:
    """Aggregated outcome of a build run.

    Attributes:
        package_name: Name of the package being built
        timestamp: Build start timestamp (UTC)
        status: Current build status
        decision: Reconciler decision (None until fingerprinting completes)
        objects: Merged context, object name to value
        record: Fingerprint record that was (or would be) persisted
        produced_by: Unit identifier to allowlisted names it produced
        missing_objects: Allowlisted names no unit produced
        persisted: Whether objects and digests were written
        documented: Whether documentation was synthesized
    """

    package_name: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    status: BuildStatus = BuildStatus.PENDING
    decision: BuildDecision | None = None
    objects: dict[str, Any] = field(default_factory=dict)
    record: FingerprintRecord | None = None
    produced_by: dict[str, list[str]] = field(default_factory=dict)
    missing_objects: list[str] = field(default_factory=list)
    persisted: bool = False
    documented: bool = False

    @property
    def version(self) -> DataVersion | None:
        """Data version reported by this build."""
        return self.decision.version if self.decision else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "package_name": self.package_name,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "decision": self.decision.kind.value if self.decision else None,
            "version": str(self.version) if self.version else None,
            "objects": sorted(self.objects),
            "missing_objects": self.missing_objects,
            "persisted": self.persisted,
            "documented": self.documented,
        }
