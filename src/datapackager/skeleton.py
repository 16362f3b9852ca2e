"""Data package skeleton creation.

Creates the directory layout, manifest and build configuration a build
expects, and copies processing scripts into data-raw/.
"""

import logging
import shutil
from pathlib import Path

from datapackager.config import create_default_config
from datapackager.errors import ConfigurationError
from datapackager.manifest import DEFAULT_DATA_VERSION, PackageManifest
from datapackager.models import DataPackage
from datapackager.models.package import EXTDATA_DIR, REQUIRED_DIRS
from datapackager.storage import OBJECT_SUFFIX

logger = logging.getLogger(__name__)

README_FILE = "Read-and-delete-me"

README_TEXT = """\
Edit DESCRIPTION.yml to reflect the contents of your package.
Optionally put your raw data under 'inst/extdata/'. If the data sets are
large, they may reside elsewhere outside the package source tree.
Processing scripts passed to 'datapackager init' are now in 'data-raw/'.
When you run 'datapackager build', your data sets are stored in 'data/'
and automatically documented. Edit datapackager.yml to add processing
files or data objects to the package.
After building, edit data-raw/documentation.md to fill in the data set
documentation, then rebuild.

NOTES
The object names you wish to make available (and document) in the
package must be top-level names assigned by your scripts and must be
listed under 'objects:' in datapackager.yml.
"""


def validate_code_files(code_files: list[Path]) -> None:
    """Check that every code file exists and is a Python script.

    Raises:
        ConfigurationError: If a file is missing or not a .py file
    """
    missing = [str(f) for f in code_files if not f.is_file()]
    if missing:
        raise ConfigurationError(f"code files do not all exist: {', '.join(missing)}")

    wrong = [str(f) for f in code_files if f.suffix.lower() != ".py"]
    if wrong:
        raise ConfigurationError(f"code files are not Python scripts: {', '.join(wrong)}")


def create_skeleton(
    name: str,
    path: Path = Path("."),
    objects: list[str] | None = None,
    code_files: list[Path] | None = None,
    force: bool = False,
    data_version: str = DEFAULT_DATA_VERSION,
) -> DataPackage:
    """Create a data package skeleton.

    Args:
        name: Package name (also the directory name)
        path: Directory to create the package in
        objects: Names of the objects the code files create
        code_files: Processing scripts to copy into data-raw/
        force: Recreate an existing package skeleton
        data_version: Initial data version

    Returns:
        The created DataPackage

    Raises:
        ConfigurationError: If no object names are given, code files are
            invalid, or the package exists and force is not set
    """
    objects = list(objects or [])
    code_files = [Path(f) for f in code_files or []]

    if not name:
        raise ConfigurationError("Must supply a package name")
    if not objects:
        raise ConfigurationError("No object names specified to move into the data package.")
    validate_code_files(code_files)

    package = DataPackage.from_path(Path(path) / name)
    if package.path.exists() and not force:
        raise ConfigurationError(f"{package.path} already exists. Use force to recreate it.")

    logger.info("Creating package directories in %s", package.path)
    for d in (*REQUIRED_DIRS, EXTDATA_DIR):
        (package.path / d).mkdir(parents=True, exist_ok=True)

    if force:
        # Built objects and published docs belong to the previous skeleton
        stale_files = [
            *package.data_dir.glob(f"*{OBJECT_SUFFIX}"),
            *package.docs_dir.glob("*.md"),
        ]
        for stale in stale_files:
            logger.debug("Removing %s", stale)
            stale.unlink()

    logger.info("Adding data_version %s to %s", data_version, package.manifest_file.name)
    PackageManifest.create(package.manifest_file, name, data_version).save()

    for code_file in code_files:
        shutil.copy2(code_file, package.raw_data_dir / code_file.name)

    logger.info("Configuring %s", package.config_file.name)
    package.config_file.write_text(
        create_default_config([f.name for f in code_files], objects),
        encoding="utf-8",
    )
    (package.path / README_FILE).write_text(README_TEXT, encoding="utf-8")

    if not code_files:
        logger.warning(
            "No code files given; add processing scripts to %s and list them in %s",
            package.raw_data_dir,
            package.config_file.name,
        )

    return package
