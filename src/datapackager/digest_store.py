"""Persisted fingerprint record (the DATADIGEST file).

The record is stored as block-style YAML with sorted keys, so it diffs cleanly
under version control and loads back to an identical FingerprintRecord:

    DataVersion: 0.1.2
    digests:
      mtcars: 3f2a...
      tbl: 9c41...
"""

import logging
import os
import tempfile
from pathlib import Path

import yaml

from datapackager.errors import DigestStoreError
from datapackager.models import DataVersion, FingerprintRecord
from datapackager.models.package import DIGEST_FILE

logger = logging.getLogger(__name__)

VERSION_KEY = "DataVersion"
DIGESTS_KEY = "digests"


def atomic_write_text(path: Path, content: str) -> None:
    """Write text so readers see either the old file or the complete new one.

    Writes to a temporary file in the target directory, fsyncs it, then
    renames it over the target.

    Args:
        path: Destination file
        content: Text to write
    """
    atomic_write_bytes(path, content.encode("utf-8"))


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """Binary counterpart of atomic_write_text."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class DigestStore:
    """Reads and writes the fingerprint record of the previous build."""

    def __init__(self, build_root: Path, filename: str = DIGEST_FILE) -> None:
        """Initialize the digest store.

        Args:
            build_root: Package root directory
            filename: Name of the digest file
        """
        self.path = Path(build_root) / filename

    def load(self) -> FingerprintRecord | None:
        """Load the persisted record.

        Returns:
            FingerprintRecord, or None on a first build (no digest file)

        Raises:
            DigestStoreError: If the file exists but is not a valid record
        """
        if not self.path.exists():
            logger.debug("No digest file at %s", self.path)
            return None

        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise DigestStoreError(f"Malformed digest file {self.path}: {e}") from e

        if not isinstance(data, dict) or VERSION_KEY not in data:
            raise DigestStoreError(f"Digest file {self.path} has no {VERSION_KEY} entry")

        try:
            version = DataVersion.parse(str(data[VERSION_KEY]))
        except ValueError as e:
            raise DigestStoreError(f"Digest file {self.path}: {e}") from e

        digests = data.get(DIGESTS_KEY) or {}
        if not isinstance(digests, dict):
            raise DigestStoreError(f"Digest file {self.path}: '{DIGESTS_KEY}' must be a mapping")

        return FingerprintRecord(
            digests={str(k): str(v) for k, v in digests.items()},
            version=version,
        )

    def save(self, record: FingerprintRecord) -> None:
        """Persist a record atomically.

        Args:
            record: Record to write
        """
        content = yaml.safe_dump(
            record.to_dict(),
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
        )
        atomic_write_text(self.path, content)
        logger.debug("Saved digest record (version %s) to %s", record.version, self.path)
