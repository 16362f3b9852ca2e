"""Shared pytest fixtures for datapackager tests.

Fixtures are organized by category:
- Package fixtures: Data package source trees on disk
- Configuration fixtures: Config dictionaries for the loader
- Record fixtures: Fingerprint records for reconciliation tests
"""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from datapackager.models import DataVersion, FingerprintRecord
from tests.fixtures import SUMMARY_SCRIPT, TABLE_SCRIPT, write_package

# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_datapackager_logger() -> Iterator[None]:
    """Drop handlers installed by setup_logging (e.g. from CLI runs) after each test."""
    yield
    logger = logging.getLogger("datapackager")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Package Fixtures
# =============================================================================


@pytest.fixture
def two_unit_package(tmp_path: Path) -> Path:
    """A package whose second script reads the first script's object."""
    return write_package(
        tmp_path,
        scripts={"01_table.py": TABLE_SCRIPT, "02_summary.py": SUMMARY_SCRIPT},
        objects=["tbl", "summary"],
    )


@pytest.fixture
def empty_package_dirs(tmp_path: Path) -> Path:
    """A package root with the required directories and nothing else."""
    root = tmp_path / "emptypkg"
    for d in ("data-raw", "data", "docs", "inst"):
        (root / d).mkdir(parents=True)
    return root


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid configuration."""
    return {
        "configuration": {
            "files": {"process.py": {"enabled": True}},
            "objects": ["tbl"],
        }
    }


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a configuration with all options."""
    return {
        "configuration": {
            "files": {
                "01_load.py": {"enabled": True},
                "02_clean.py": {"enabled": False},
                "03_tidy.py": {"enabled": True},
            },
            "objects": ["raw", "tidy"],
            "render_root": "inst/extdata",
        },
        "build": {
            "strict_objects": True,
            "strict_version": False,
        },
    }


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def old_record() -> FingerprintRecord:
    """Record of a previous build at 1.0.0."""
    return FingerprintRecord(digests={"tbl": "aaa", "summary": "bbb"}, version=DataVersion(1, 0, 0))


@pytest.fixture
def same_data_record() -> FingerprintRecord:
    """Record with the same digests as old_record."""
    return FingerprintRecord(digests={"summary": "bbb", "tbl": "aaa"}, version=DataVersion(1, 0, 0))


@pytest.fixture
def changed_data_record() -> FingerprintRecord:
    """Record where tbl changed relative to old_record."""
    return FingerprintRecord(digests={"tbl": "ccc", "summary": "bbb"}, version=DataVersion(1, 0, 0))
