"""Package manifest (DESCRIPTION.yml).

The manifest carries the package name and the data version string. Other
fields belong to the package author and are written back untouched.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from datapackager.digest_store import atomic_write_text
from datapackager.errors import ConfigurationError
from datapackager.models import DataVersion

logger = logging.getLogger(__name__)

NAME_KEY = "package"
VERSION_KEY = "data_version"
DEFAULT_DATA_VERSION = "0.1.0"


class PackageManifest:
    """Reader/writer for the package manifest."""

    def __init__(self, path: Path, data: dict[str, Any]) -> None:
        self.path = path
        self._data = data

    @classmethod
    def load(cls, path: Path) -> "PackageManifest":
        """Read a manifest file.

        Args:
            path: Path to DESCRIPTION.yml

        Returns:
            PackageManifest instance

        Raises:
            ConfigurationError: If the file is missing or lacks required fields
        """
        if not path.exists():
            raise ConfigurationError(f"No valid package manifest at {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed package manifest {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Package manifest {path} must be a mapping")

        for key in (NAME_KEY, VERSION_KEY):
            if key not in data:
                raise ConfigurationError(f"Package manifest {path} is missing '{key}'")

        manifest = cls(path, data)
        # Fail before any unit runs if the version was hand-edited into garbage
        try:
            manifest.get_version()
        except ValueError as e:
            raise ConfigurationError(f"Package manifest {path}: {e}") from e
        return manifest

    @classmethod
    def create(cls, path: Path, name: str, version: str = DEFAULT_DATA_VERSION) -> "PackageManifest":
        """Build a new manifest for a package skeleton (not yet saved)."""
        return cls(path, {NAME_KEY: name, VERSION_KEY: version})

    def get_package_name(self) -> str:
        return str(self._data[NAME_KEY])

    def get_version_string(self) -> str:
        return str(self._data[VERSION_KEY])

    def set_version_string(self, version: str | DataVersion) -> None:
        self._data[VERSION_KEY] = str(version)

    def get_version(self) -> DataVersion:
        """Return the data version parsed from the manifest."""
        return DataVersion.parse(self.get_version_string())

    def save(self) -> None:
        """Write the manifest atomically, preserving field order."""
        content = yaml.safe_dump(self._data, default_flow_style=False, sort_keys=False)
        atomic_write_text(self.path, content)
        logger.debug("Saved manifest %s", self.path)
