"""Unit tests for the package manifest."""

from pathlib import Path

import pytest
import yaml

from datapackager.errors import ConfigurationError
from datapackager.manifest import PackageManifest
from datapackager.models import DataVersion


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    """Manifest with extra author fields."""
    path = tmp_path / "DESCRIPTION.yml"
    path.write_text(
        "package: mtcarspkg\n"
        "title: Motor Trend car road tests\n"
        "data_version: 0.1.0\n"
        "authors:\n"
        "- Jane Doe\n"
    )
    return path


class TestPackageManifest:
    """Tests for PackageManifest."""

    def test_load(self, manifest_file: Path) -> None:
        """Test reading name and version."""
        manifest = PackageManifest.load(manifest_file)

        assert manifest.get_package_name() == "mtcarspkg"
        assert manifest.get_version_string() == "0.1.0"
        assert manifest.get_version() == DataVersion(0, 1, 0)

    def test_save_preserves_other_fields(self, manifest_file: Path) -> None:
        """Test that only the version changes on save."""
        manifest = PackageManifest.load(manifest_file)
        manifest.set_version_string(DataVersion(0, 1, 1))
        manifest.save()

        data = yaml.safe_load(manifest_file.read_text())

        assert data["data_version"] == "0.1.1"
        assert data["title"] == "Motor Trend car road tests"
        assert data["authors"] == ["Jane Doe"]
        assert list(data) == ["package", "title", "data_version", "authors"]

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing manifest is a configuration error."""
        with pytest.raises(ConfigurationError, match="No valid package manifest"):
            PackageManifest.load(tmp_path / "DESCRIPTION.yml")

    def test_missing_version_key(self, tmp_path: Path) -> None:
        """Test that data_version is required."""
        path = tmp_path / "DESCRIPTION.yml"
        path.write_text("package: x\n")

        with pytest.raises(ConfigurationError, match="data_version"):
            PackageManifest.load(path)

    def test_invalid_version(self, tmp_path: Path) -> None:
        """Test that a malformed data version fails at load time."""
        path = tmp_path / "DESCRIPTION.yml"
        path.write_text("package: x\ndata_version: '1.2'\n")

        with pytest.raises(ConfigurationError, match="Invalid data version"):
            PackageManifest.load(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Test that a list manifest is rejected."""
        path = tmp_path / "DESCRIPTION.yml"
        path.write_text("- package\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            PackageManifest.load(path)

    def test_create(self, tmp_path: Path) -> None:
        """Test creating and saving a new manifest."""
        path = tmp_path / "DESCRIPTION.yml"
        PackageManifest.create(path, "newpkg").save()

        manifest = PackageManifest.load(path)

        assert manifest.get_package_name() == "newpkg"
        assert manifest.get_version() == DataVersion(0, 1, 0)
