"""DataPackage entity representing the package source tree being built.

The DataPackage entity knows where each part of the package lives and
validates that the expected directory structure is present.
"""

from dataclasses import dataclass
from pathlib import Path

from datapackager.errors import ConfigurationError

RAW_DATA_DIR = "data-raw"
DATA_DIR = "data"
DOCS_DIR = "docs"
INST_DIR = "inst"
EXTDATA_DIR = "inst/extdata"

CONFIG_FILE = "datapackager.yml"
MANIFEST_FILE = "DESCRIPTION.yml"
DIGEST_FILE = "DATADIGEST"
DOCUMENTATION_FILE = "documentation.md"

REQUIRED_DIRS = (RAW_DATA_DIR, DATA_DIR, DOCS_DIR, INST_DIR)


@dataclass
class DataPackage:
    """Source tree of a data package.

    Attributes:
        path: Absolute path to the package root
        name: Directory name of the package root

    Validation Rules:
        - path must exist and be a directory
        - data-raw, data, docs and inst subdirectories must exist
    """

    path: Path
    name: str

    def __post_init__(self) -> None:
        if isinstance(self.path, str):
            self.path = Path(self.path)
        self.path = self.path.resolve()

    @property
    def raw_data_dir(self) -> Path:
        return self.path / RAW_DATA_DIR

    @property
    def data_dir(self) -> Path:
        return self.path / DATA_DIR

    @property
    def docs_dir(self) -> Path:
        return self.path / DOCS_DIR

    @property
    def extdata_dir(self) -> Path:
        return self.path / EXTDATA_DIR

    @property
    def config_file(self) -> Path:
        return self.path / CONFIG_FILE

    @property
    def manifest_file(self) -> Path:
        return self.path / MANIFEST_FILE

    @property
    def digest_file(self) -> Path:
        return self.path / DIGEST_FILE

    @property
    def documentation_file(self) -> Path:
        return self.raw_data_dir / DOCUMENTATION_FILE

    def missing_dirs(self) -> list[str]:
        """Return the required subdirectories that do not exist."""
        return [d for d in REQUIRED_DIRS if not (self.path / d).is_dir()]

    def validate(self) -> None:
        """Validate the package structure.

        Raises:
            ConfigurationError: If the path is not a directory or a required
                subdirectory is missing
        """
        if not self.path.exists():
            raise ConfigurationError(f"Package path does not exist: {self.path}")

        if not self.path.is_dir():
            raise ConfigurationError(f"Package path is not a directory: {self.path}")

        missing = self.missing_dirs()
        if missing:
            raise ConfigurationError(
                "You need a valid package data structure. Missing "
                + ", ".join(f"./{d}" for d in missing)
                + " subdirectories."
            )

    @classmethod
    def from_path(cls, path: Path | str, name: str | None = None) -> "DataPackage":
        """Create a DataPackage from a path.

        Args:
            path: Path to the package root
            name: Optional name override (defaults to directory name)

        Returns:
            DataPackage instance
        """
        path = Path(path).resolve()
        if name is None:
            name = path.name

        return cls(path=path, name=name)
