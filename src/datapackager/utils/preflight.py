"""Preflight validation of a data package.

Everything a build needs is validated before any processing unit runs:
directory layout, configuration, manifest, unit files and the previous
digest record. A failed required check means the build would fail.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from datapackager.config import DataPackagerConfig, load_config
from datapackager.digest_store import DigestStore
from datapackager.errors import DataPackagerError
from datapackager.manifest import PackageManifest
from datapackager.models import DataPackage
from datapackager.models.package import REQUIRED_DIRS


@dataclass
class PackageCheck:
    """Result of a single preflight check.

    Attributes:
        name: Check name
        passed: Whether the check passed
        required: Whether a failure blocks the build
        detail: Value found (version, file count, ...) when passed
        message: Status message (human-readable context)
    """

    name: str
    passed: bool
    required: bool = True
    detail: str | None = None
    message: str = ""


@dataclass
class PreflightResult:
    """Result of preflight validation.

    Attributes:
        success: Whether all required checks passed
        checks: Individual check results
        errors: Messages for failed required checks
        warnings: Messages for failed optional checks
    """

    success: bool = True
    checks: list[PackageCheck] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_check(self, check: PackageCheck) -> None:
        """Add a check result."""
        self.checks.append(check)

        if not check.passed:
            if check.required:
                self.success = False
                self.errors.append(f"{check.name}: {check.message}")
            else:
                self.warnings.append(f"{check.name}: {check.message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "checks": [
                {
                    "name": c.name,
                    "passed": c.passed,
                    "required": c.required,
                    "detail": c.detail,
                    "message": c.message,
                }
                for c in self.checks
            ],
            "errors": self.errors,
            "warnings": self.warnings,
        }


class PreflightChecker:
    """Validates a package before building.

    Usage:
        checker = PreflightChecker()
        result = checker.check_all(Path("mypkg"))
        if not result.success:
            sys.exit(1)
    """

    def check_layout(self, package: DataPackage) -> list[PackageCheck]:
        """Check the package root and its required subdirectories."""
        if not package.path.is_dir():
            return [
                PackageCheck(
                    name="package",
                    passed=False,
                    message=f"Package path is not a directory: {package.path}",
                )
            ]

        return [
            PackageCheck(
                name=f"{d}/",
                passed=(package.path / d).is_dir(),
                message="" if (package.path / d).is_dir() else f"Missing ./{d} subdirectory",
            )
            for d in REQUIRED_DIRS
        ]

    def check_config(
        self,
        package: DataPackage,
        config_path: Path | None = None,
    ) -> tuple[PackageCheck, DataPackagerConfig | None]:
        """Check that the build configuration loads and validates."""
        try:
            config = load_config(config_path=config_path, package_path=package.path)
        except DataPackagerError as e:
            return PackageCheck(name="configuration", passed=False, message=str(e)), None

        enabled = config.configuration.enabled_units
        return (
            PackageCheck(
                name="configuration",
                passed=True,
                detail=f"{len(enabled)} enabled files, {len(config.configuration.objects)} objects",
            ),
            config,
        )

    def check_manifest(self, package: DataPackage) -> PackageCheck:
        """Check that the manifest loads and carries a valid data version."""
        try:
            manifest = PackageManifest.load(package.manifest_file)
        except DataPackagerError as e:
            return PackageCheck(name="manifest", passed=False, message=str(e))

        return PackageCheck(
            name="manifest",
            passed=True,
            detail=f"{manifest.get_package_name()} {manifest.get_version()}",
        )

    def check_units(self, package: DataPackage, config: DataPackagerConfig) -> list[PackageCheck]:
        """Check that every configured unit file exists.

        Missing enabled units are errors; missing disabled units are warnings.
        """
        checks: list[PackageCheck] = []
        for unit in config.configuration.units:
            exists = (package.raw_data_dir / unit.identifier).is_file()
            checks.append(
                PackageCheck(
                    name=unit.identifier,
                    passed=exists,
                    required=unit.enabled,
                    detail="enabled" if unit.enabled else "disabled",
                    message="" if exists else f"File not found in {package.raw_data_dir}",
                )
            )
        return checks

    def check_render_root(self, package: DataPackage, config: DataPackagerConfig) -> PackageCheck:
        render_root = config.configuration.render_root
        if render_root is None:
            return PackageCheck(name="render_root", passed=True, detail=str(package.path))

        root = Path(render_root)
        if not root.is_absolute():
            root = package.path / root
        return PackageCheck(
            name="render_root",
            passed=root.is_dir(),
            detail=str(root),
            message="" if root.is_dir() else f"render_root = {render_root} doesn't exist",
        )

    def check_digest(self, package: DataPackage) -> PackageCheck:
        """Check that the previous digest record, if any, is readable."""
        try:
            record = DigestStore(package.path).load()
        except DataPackagerError as e:
            return PackageCheck(name="digest", passed=False, message=str(e))

        if record is None:
            return PackageCheck(name="digest", passed=True, detail="none (first build)")
        return PackageCheck(
            name="digest",
            passed=True,
            detail=f"{len(record.digests)} objects at version {record.version}",
        )

    def check_documentation(self, package: DataPackage) -> PackageCheck:
        exists = package.documentation_file.exists()
        return PackageCheck(
            name="documentation",
            passed=exists,
            required=False,
            message="" if exists else "No documentation yet; stubs are generated on the next build",
        )

    def check_all(
        self,
        package_path: Path,
        config_path: Path | None = None,
    ) -> PreflightResult:
        """Run all preflight checks.

        Args:
            package_path: Package root
            config_path: Explicit configuration file

        Returns:
            PreflightResult with all check outcomes
        """
        result = PreflightResult()
        package = DataPackage.from_path(package_path)

        for check in self.check_layout(package):
            result.add_check(check)
        if not package.path.is_dir():
            return result

        config_check, config = self.check_config(package, config_path)
        result.add_check(config_check)
        result.add_check(self.check_manifest(package))

        if config is not None:
            for check in self.check_units(package, config):
                result.add_check(check)
            result.add_check(self.check_render_root(package, config))

        result.add_check(self.check_digest(package))
        result.add_check(self.check_documentation(package))

        return result
