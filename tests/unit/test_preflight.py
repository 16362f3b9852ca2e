"""Unit tests for preflight validation."""

from pathlib import Path

from datapackager.utils.preflight import PackageCheck, PreflightChecker, PreflightResult
from tests.fixtures import TABLE_SCRIPT, write_package


class TestPreflightResult:
    """Tests for PreflightResult."""

    def test_initial_state(self) -> None:
        """Test initial preflight result state."""
        result = PreflightResult()

        assert result.success is True
        assert result.checks == []
        assert result.errors == []
        assert result.warnings == []

    def test_add_passing_check(self) -> None:
        """Test adding a passing check."""
        result = PreflightResult()
        result.add_check(PackageCheck(name="data/", passed=True))

        assert result.success is True
        assert len(result.checks) == 1

    def test_add_failing_required_check(self) -> None:
        """Test adding a failing required check."""
        result = PreflightResult()
        result.add_check(PackageCheck(name="manifest", passed=False, message="missing"))

        assert result.success is False
        assert result.errors == ["manifest: missing"]

    def test_add_failing_optional_check(self) -> None:
        """Test adding a failing optional check."""
        result = PreflightResult()
        result.add_check(PackageCheck(name="documentation", passed=False, required=False, message="none"))

        assert result.success is True
        assert result.warnings == ["documentation: none"]

    def test_to_dict(self) -> None:
        """Test JSON conversion."""
        result = PreflightResult()
        result.add_check(PackageCheck(name="digest", passed=True, detail="none (first build)"))

        data = result.to_dict()

        assert data["success"] is True
        assert data["checks"][0]["detail"] == "none (first build)"


class TestPreflightChecker:
    """Tests for PreflightChecker."""

    def test_valid_package(self, two_unit_package: Path) -> None:
        """Test that a complete package passes with only the docs warning."""
        result = PreflightChecker().check_all(two_unit_package)

        assert result.success is True
        assert result.errors == []
        assert [w.split(":")[0] for w in result.warnings] == ["documentation"]

    def test_missing_directories(self, tmp_path: Path) -> None:
        """Test that each missing directory is reported."""
        result = PreflightChecker().check_all(tmp_path)

        assert result.success is False
        assert any("Missing ./data-raw" in e for e in result.errors)

    def test_not_a_directory(self, tmp_path: Path) -> None:
        """Test that a nonexistent path stops after the layout check."""
        result = PreflightChecker().check_all(tmp_path / "missing")

        assert result.success is False
        assert [c.name for c in result.checks] == ["package"]

    def test_missing_enabled_unit(self, tmp_path: Path) -> None:
        """Test that a configured but absent enabled unit fails."""
        package = write_package(tmp_path, {"01_table.py": TABLE_SCRIPT}, ["tbl"])
        (package / "data-raw" / "01_table.py").unlink()

        result = PreflightChecker().check_all(package)

        assert result.success is False
        assert any(e.startswith("01_table.py:") for e in result.errors)

    def test_missing_disabled_unit_is_warning(self, tmp_path: Path) -> None:
        """Test that an absent disabled unit only warns."""
        package = write_package(
            tmp_path,
            {"01_table.py": TABLE_SCRIPT, "02_old.py": "x = 1\n"},
            ["tbl"],
            disabled=["02_old.py"],
        )
        (package / "data-raw" / "02_old.py").unlink()

        result = PreflightChecker().check_all(package)

        assert result.success is True
        assert any(w.startswith("02_old.py:") for w in result.warnings)

    def test_bad_render_root(self, tmp_path: Path) -> None:
        """Test that a missing render root fails."""
        package = write_package(tmp_path, {"01_table.py": TABLE_SCRIPT}, ["tbl"], render_root="nowhere")

        result = PreflightChecker().check_all(package)

        assert any("render_root = nowhere" in e for e in result.errors)

    def test_bad_manifest(self, two_unit_package: Path) -> None:
        """Test that an invalid data version fails."""
        (two_unit_package / "DESCRIPTION.yml").write_text("package: testpkg\ndata_version: latest\n")

        result = PreflightChecker().check_all(two_unit_package)

        assert any(e.startswith("manifest:") for e in result.errors)

    def test_corrupt_digest(self, two_unit_package: Path) -> None:
        """Test that an unreadable digest record fails."""
        (two_unit_package / "DATADIGEST").write_text("digests: {}\n")

        result = PreflightChecker().check_all(two_unit_package)

        assert any(e.startswith("digest:") for e in result.errors)
