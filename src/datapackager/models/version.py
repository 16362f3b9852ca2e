"""Data version string.

A data version is three non-negative integers (major.minor.patch), compared
component by component. It lives in the package manifest independently of the
digest record, so a human may edit it between builds.
"""

import re
from typing import NamedTuple

_VERSION_RE = re.compile(r"^\s*(\d+)\.(\d+)\.(\d+)\s*$")


class DataVersion(NamedTuple):
    """Three-component data version.

    Tuple ordering gives the lexicographic component order, so
    DataVersion(1, 10, 0) > DataVersion(1, 9, 5).

    Attributes:
        major: Major component (never auto-incremented)
        minor: Minor component (never auto-incremented)
        patch: Patch component (incremented when data changes)
    """

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, value: "str | DataVersion") -> "DataVersion":
        """Parse a "major.minor.patch" string.

        Args:
            value: Version string, or an existing DataVersion

        Returns:
            DataVersion instance

        Raises:
            ValueError: If the string is not three dot-separated integers
        """
        if isinstance(value, DataVersion):
            return value

        match = _VERSION_RE.match(str(value))
        if match is None:
            raise ValueError(
                f"Invalid data version '{value}'. Expected major.minor.patch"
            )
        return cls(*(int(part) for part in match.groups()))

    def bump_patch(self) -> "DataVersion":
        """Return this version with the patch component incremented by one."""
        return DataVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
