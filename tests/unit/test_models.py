"""Unit tests for core models."""

from pathlib import Path

import pytest

from datapackager.errors import ConfigurationError
from datapackager.models import (
    BuildDecision,
    BuildResult,
    BuildStatus,
    DataPackage,
    DataVersion,
    DecisionKind,
    FingerprintRecord,
)


class TestDataPackage:
    """Tests for DataPackage entity."""

    def test_create_from_path(self, tmp_path: Path) -> None:
        """Test creating a package from a path."""
        package = DataPackage.from_path(tmp_path)

        assert package.path == tmp_path.resolve()
        assert package.name == tmp_path.name

    def test_create_with_custom_name(self, tmp_path: Path) -> None:
        """Test creating a package with a custom name."""
        package = DataPackage.from_path(tmp_path, name="mypkg")

        assert package.name == "mypkg"

    def test_paths(self, tmp_path: Path) -> None:
        """Test where each part of the package lives."""
        package = DataPackage.from_path(tmp_path)
        root = tmp_path.resolve()

        assert package.raw_data_dir == root / "data-raw"
        assert package.data_dir == root / "data"
        assert package.docs_dir == root / "docs"
        assert package.extdata_dir == root / "inst" / "extdata"
        assert package.config_file == root / "datapackager.yml"
        assert package.manifest_file == root / "DESCRIPTION.yml"
        assert package.digest_file == root / "DATADIGEST"
        assert package.documentation_file == root / "data-raw" / "documentation.md"

    def test_validate_complete_layout(self, empty_package_dirs: Path) -> None:
        """Test that a package with all directories validates."""
        DataPackage.from_path(empty_package_dirs).validate()

    def test_validate_missing_dirs(self, tmp_path: Path) -> None:
        """Test that missing subdirectories are all named."""
        (tmp_path / "data-raw").mkdir()
        package = DataPackage.from_path(tmp_path)

        assert package.missing_dirs() == ["data", "docs", "inst"]
        with pytest.raises(ConfigurationError, match=r"Missing ./data, ./docs, ./inst subdirectories"):
            package.validate()

    def test_validate_nonexistent_path(self, tmp_path: Path) -> None:
        """Test validating a path that does not exist."""
        with pytest.raises(ConfigurationError, match="does not exist"):
            DataPackage.from_path(tmp_path / "nope").validate()

    def test_validate_file_path(self, tmp_path: Path) -> None:
        """Test validating a path that is a file."""
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")

        with pytest.raises(ConfigurationError, match="not a directory"):
            DataPackage.from_path(file_path).validate()


class TestFingerprintRecord:
    """Tests for FingerprintRecord."""

    def test_to_dict_sorts_digests(self) -> None:
        """Test the serialized form."""
        record = FingerprintRecord({"b": "2", "a": "1"}, DataVersion(0, 1, 0))

        assert record.to_dict() == {"DataVersion": "0.1.0", "digests": {"a": "1", "b": "2"}}
        assert list(record.to_dict()["digests"]) == ["a", "b"]

    def test_with_version_copies(self) -> None:
        """Test that with_version leaves the original untouched."""
        record = FingerprintRecord({"a": "1"}, DataVersion(0, 1, 0))

        updated = record.with_version(DataVersion(0, 1, 1))

        assert updated.version == DataVersion(0, 1, 1)
        assert record.version == DataVersion(0, 1, 0)
        assert updated.digests is not record.digests


class TestBuildDecision:
    """Tests for BuildDecision."""

    def test_constructors(self) -> None:
        """Test the decision constructors."""
        v = DataVersion(1, 0, 0)

        assert BuildDecision.unchanged(v).kind is DecisionKind.WRITE_UNCHANGED
        assert BuildDecision.incremented(v).kind is DecisionKind.WRITE_INCREMENTED
        assert BuildDecision.as_is(v).kind is DecisionKind.WRITE_AS_IS
        assert BuildDecision.fatal("why").kind is DecisionKind.FATAL

    def test_only_fatal_does_not_write(self) -> None:
        """Test the writes property."""
        assert BuildDecision.as_is(DataVersion(0, 1, 0)).writes
        assert not BuildDecision.fatal("why").writes


class TestBuildResult:
    """Tests for BuildResult."""

    def test_defaults(self) -> None:
        """Test a fresh result."""
        result = BuildResult(package_name="pkg")

        assert result.status is BuildStatus.PENDING
        assert result.version is None
        assert result.timestamp.tzinfo is not None

    def test_to_dict(self) -> None:
        """Test JSON conversion."""
        result = BuildResult(
            package_name="pkg",
            status=BuildStatus.COMPLETED,
            decision=BuildDecision.incremented(DataVersion(0, 1, 1)),
            objects={"b": 1, "a": 2},
            persisted=True,
        )

        data = result.to_dict()

        assert data["decision"] == "write_incremented"
        assert data["version"] == "0.1.1"
        assert data["objects"] == ["a", "b"]
        assert data["status"] == "completed"
        assert data["persisted"] is True
