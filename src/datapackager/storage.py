"""Object persistence for the package's data directory.

Each object is pickled to data/<name>.pkl with an atomic replace, so a
reader never sees a half-written object file.
"""

import logging
import pickle
from pathlib import Path
from typing import Any

from datapackager.digest_store import atomic_write_bytes
from datapackager.errors import UnserializableObjectError

logger = logging.getLogger(__name__)

OBJECT_SUFFIX = ".pkl"


class ObjectStore:
    """Stores named objects under a data directory."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}{OBJECT_SUFFIX}"

    def serialize(self, name: str, value: Any) -> bytes:
        """Pickle one object without writing it.

        Raises:
            UnserializableObjectError: If the object cannot be pickled
        """
        try:
            return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise UnserializableObjectError(type(value).__qualname__, name=name) from e

    def store(self, name: str, value: Any) -> Path:
        """Serialize one object.

        Args:
            name: Object name
            value: Object to store

        Returns:
            Path of the written file
        """
        path = self.path_for(name)
        atomic_write_bytes(path, self.serialize(name, value))
        logger.debug("Stored %s to %s", name, path)
        return path

    def load(self, name: str) -> Any:
        """Read back a stored object.

        Raises:
            FileNotFoundError: If the object was never stored
        """
        with open(self.path_for(name), "rb") as f:
            return pickle.load(f)

    def names(self) -> list[str]:
        """Names of all stored objects."""
        if not self.data_dir.is_dir():
            return []
        return sorted(p.stem for p in self.data_dir.glob(f"*{OBJECT_SUFFIX}"))
