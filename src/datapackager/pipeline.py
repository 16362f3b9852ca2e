"""Data package build orchestrator.

Runs the enabled processing units in order, merges the allowlisted objects
they produce, fingerprints the result, reconciles it against the previous
build and the manifest's data version, and only then writes anything.

The pipeline sequence:
1. Validation (package layout, configuration, unit files, render root)
2. Unit execution, one fresh namespace per unit
3. Fingerprinting and version reconciliation
4. Persistence (objects, manifest version, digest record)
5. Documentation synthesis

Every fatal error is raised before stage 4, so a failed build leaves the
package directory untouched.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from datapackager.config import DataPackagerConfig
from datapackager.digest_store import DigestStore
from datapackager.documentation import DocumentationSynthesizer, DocumentationWriter
from datapackager.errors import (
    ConfigurationError,
    DataPackagerError,
    MissingObjectsError,
    UnitExecutionError,
    VersionInconsistentError,
)
from datapackager.fingerprint import diff_records, digest_all
from datapackager.manifest import PackageManifest
from datapackager.models import (
    BuildResult,
    BuildStatus,
    DataPackage,
    FingerprintRecord,
    ProcessingUnit,
)
from datapackager.render import ScriptRenderer, UnitRenderer
from datapackager.storage import ObjectStore
from datapackager.utils.logging import UnitLogger
from datapackager.versioning import reconcile

logger = logging.getLogger(__name__)


@dataclass
class BuildOptions:
    """Options for controlling a build.

    Attributes:
        strict_objects: Override build.strict_objects from the config
        strict_version: Override build.strict_version from the config
        dry_run: Run units and reconcile, but write nothing
    """

    strict_objects: bool | None = None
    strict_version: bool | None = None
    dry_run: bool = False


@dataclass
class _PlannedUnit:
    unit: ProcessingUnit
    path: Path
    renderer: UnitRenderer


class BuildPipeline:
    """Builds a data package from its processing units.

    Usage:
        pipeline = BuildPipeline(DataPackage.from_path(path), load_config(package_path=path))
        result = pipeline.run()
    """

    def __init__(
        self,
        package: DataPackage,
        config: DataPackagerConfig,
        renderers: list[UnitRenderer] | None = None,
        object_store: ObjectStore | None = None,
        digest_store: DigestStore | None = None,
        doc_writer: DocumentationWriter | None = None,
    ) -> None:
        """Initialize the build pipeline.

        Args:
            package: Package to build
            config: Build configuration
            renderers: Unit renderers, tried in order (default: Python scripts)
            object_store: Sink for built objects (default: package data dir)
            digest_store: Fingerprint record store (default: package DATADIGEST)
            doc_writer: Sink for published documentation
        """
        self.package = package
        self.config = config
        self.renderers = renderers or [ScriptRenderer()]
        self.object_store = object_store or ObjectStore(package.data_dir)
        self.digest_store = digest_store or DigestStore(package.path)
        self.doc_writer = doc_writer

    def run(self, options: BuildOptions | None = None) -> BuildResult:
        """Execute the build.

        Args:
            options: Build options

        Returns:
            BuildResult with the decision, merged objects and new record

        Raises:
            ConfigurationError: Invalid package, configuration or manifest
            UnitExecutionError: A processing unit failed
            UnserializableObjectError: A built object cannot be fingerprinted
            MissingObjectsError: Strict mode and an allowlisted object is missing
            VersionInconsistentError: Strict mode and data changed with a hand-bumped version
        """
        options = options or BuildOptions()
        strict_objects = self._setting(options.strict_objects, self.config.build.strict_objects)
        strict_version = self._setting(options.strict_version, self.config.build.strict_version)

        result = BuildResult(package_name=self.package.name, status=BuildStatus.RUNNING)
        logger.info("Processing data")

        try:
            # Stage 1: Validation
            planned, render_root = self._validate()
            manifest = PackageManifest.load(self.package.manifest_file)
            result.package_name = manifest.get_package_name()
            old_record = self.digest_store.load()

            # Stage 2: Unit execution
            self._run_units(planned, render_root, result)
            self._check_missing_objects(result, strict_objects)

            # Stage 3: Fingerprinting and reconciliation
            current_version = manifest.get_version()
            new_record = digest_all(result.objects, current_version)
            self._log_changes(old_record, new_record)

            decision = reconcile(old_record, new_record, current_version, strict=strict_version)
            result.decision = decision
            if not decision.writes:
                logger.error(decision.reason)
                raise VersionInconsistentError(decision.reason)
            logger.info(decision.reason)
            record = new_record.with_version(decision.version)
            result.record = record

            if options.dry_run:
                logger.info("Dry run - no files written")
            else:
                # Stage 4: Persistence
                self._persist(result, record, manifest)

                # Stage 5: Documentation
                self._document(result)

            result.status = BuildStatus.COMPLETED

        except DataPackagerError as e:
            result.status = BuildStatus.FAILED
            logger.error("Build failed: %s", e)
            raise
        except Exception:
            result.status = BuildStatus.FAILED
            logger.exception("Build failed unexpectedly")
            raise

        logger.info("Done")
        return result

    @staticmethod
    def _setting(override: bool | None, configured: bool) -> bool:
        return configured if override is None else override

    def _validate(self) -> tuple[list[_PlannedUnit], Path]:
        """Check everything that can be checked before running any unit.

        Returns:
            Enabled units with their resolved paths and renderers, and the
            render root
        """
        self.package.validate()
        build_config = self.config.configuration
        build_config.validate()

        render_root = self._resolve_render_root(build_config.render_root)

        planned: list[_PlannedUnit] = []
        missing: list[str] = []
        for unit in build_config.enabled_units:
            path = self.package.raw_data_dir / unit.identifier
            if not path.is_file():
                missing.append(unit.identifier)
                continue
            planned.append(_PlannedUnit(unit, path, self._renderer_for(unit, path)))

        if missing:
            raise ConfigurationError(
                f"Can't find processing files in {self.package.raw_data_dir}: {', '.join(missing)}"
            )

        logger.info("Found %s", ", ".join(p.unit.identifier for p in planned))
        return planned, render_root

    def _resolve_render_root(self, render_root: str | None) -> Path:
        if render_root is None:
            return self.package.path

        root = Path(render_root)
        if not root.is_absolute():
            root = self.package.path / root
        if not root.is_dir():
            raise ConfigurationError(f"render_root = {render_root} doesn't exist")
        return root.resolve()

    def _renderer_for(self, unit: ProcessingUnit, path: Path) -> UnitRenderer:
        for renderer in self.renderers:
            if renderer.supports(path):
                return renderer
        raise ConfigurationError(f"No renderer available for processing file {unit.identifier}")

    def _run_units(
        self,
        planned: list[_PlannedUnit],
        render_root: Path,
        result: BuildResult,
    ) -> None:
        """Run each unit into its own namespace and merge allowlisted objects.

        Later units see earlier units' objects through a read-only view.
        When two units produce the same object, the later unit's value wins.
        """
        allowlist = self.config.configuration.objects
        merged: dict[str, Any] = {}
        owners: dict[str, str] = {}
        merged_view = MappingProxyType(merged)

        for i, step in enumerate(planned, start=1):
            unit_id = step.unit.identifier
            unit_log = UnitLogger(logger, unit_id)
            unit_log.info("Processing %d of %d: %s", i, len(planned), unit_id)

            namespace: dict[str, Any] = {}
            try:
                outcome = step.renderer.execute(step.path, namespace, render_root, merged_view)
            except Exception as e:
                raise UnitExecutionError(unit_id, e) from e
            if not outcome.success:
                cause = outcome.error if outcome.error is not None else outcome.message
                raise UnitExecutionError(unit_id, cause) from outcome.error

            produced = [name for name in allowlist if name in namespace]
            unit_log.info("%d required data objects created by %s", len(produced), unit_id)

            for name in produced:
                if name in owners:
                    unit_log.warning(
                        "Object %s created by %s replaces the one created by %s",
                        name,
                        unit_id,
                        owners[name],
                    )
                merged[name] = namespace[name]
                owners[name] = unit_id

            result.produced_by[unit_id] = produced
            namespace.clear()

        result.objects = merged

    def _check_missing_objects(self, result: BuildResult, strict: bool) -> None:
        missing = [name for name in self.config.configuration.objects if name not in result.objects]
        result.missing_objects = missing
        if not missing:
            return

        if strict:
            raise MissingObjectsError(missing)
        logger.warning("Data objects not created by any file: %s", ", ".join(missing))

    @staticmethod
    def _log_changes(old_record: FingerprintRecord | None, new_record: FingerprintRecord) -> None:
        if old_record is None:
            return
        diff = diff_records(old_record, new_record)
        for label, names in (("added", diff.added), ("removed", diff.removed), ("changed", diff.changed)):
            if names:
                logger.info("Data objects %s: %s", label, ", ".join(names))

    def _persist(
        self,
        result: BuildResult,
        record: FingerprintRecord,
        manifest: PackageManifest,
    ) -> None:
        """Write objects, the manifest version and the digest record."""

        # Serialize everything first so an unpicklable object fails the
        # build before the first write
        for name, value in result.objects.items():
            self.object_store.serialize(name, value)

        for name in sorted(result.objects):
            self.object_store.store(name, result.objects[name])

        new_version = str(record.version)
        if manifest.get_version_string() != new_version:
            manifest.set_version_string(new_version)
            manifest.save()
            logger.info("DataVersion set to %s", new_version)

        self.digest_store.save(record)
        result.persisted = True
        logger.info("Stored %d data objects at version %s", len(result.objects), new_version)

    def _document(self, result: BuildResult) -> None:
        synthesizer = DocumentationSynthesizer(
            self.package,
            result.package_name,
            writer=self.doc_writer,
        )
        synthesizer.synthesize(result.objects)
        result.documented = True
