"""Datapackager data models.

This module exports all core entities used throughout the application:
- DataPackage: Package source tree being built
- DataVersion: Three-component data version
- ProcessingUnit: Configured processing script
- FingerprintRecord: Object digests plus data version
- BuildDecision: Outcome of version reconciliation
- BuildResult: Aggregated build outcome
"""

from datapackager.models.build import (
    BuildDecision,
    BuildResult,
    BuildStatus,
    DecisionKind,
    FingerprintRecord,
    ProcessingUnit,
)
from datapackager.models.package import DataPackage
from datapackager.models.version import DataVersion

__all__ = [
    "BuildDecision",
    "BuildResult",
    "BuildStatus",
    "DataPackage",
    "DataVersion",
    "DecisionKind",
    "FingerprintRecord",
    "ProcessingUnit",
]
