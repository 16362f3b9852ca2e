"""Exceptions raised during a data package build.

Every error here is fatal for the build that raised it. All of them are
raised before the first write, so a failed build leaves the package
directory exactly as it was.
"""


class DataPackagerError(Exception):
    """Base class for all datapackager errors."""


class ConfigurationError(DataPackagerError):
    """Raised when the build configuration or package layout is invalid."""


class UnitExecutionError(DataPackagerError):
    """Raised when a processing unit fails to execute."""

    def __init__(self, unit_id: str, cause: BaseException | str) -> None:
        self.unit_id = unit_id
        self.cause = cause
        super().__init__(f"Processing unit failed: {unit_id} - {cause}")


class UnserializableObjectError(DataPackagerError):
    """Raised when an object cannot be canonically serialized for fingerprinting."""

    def __init__(self, type_name: str, name: str | None = None) -> None:
        self.type_name = type_name
        self.name = name
        if name is None:
            message = f"Cannot fingerprint object of type {type_name}"
        else:
            message = f"Cannot fingerprint object '{name}' of type {type_name}"
        super().__init__(message)


class VersionInconsistentError(DataPackagerError):
    """Raised when data changed and the data version was also bumped by hand."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class MissingObjectsError(DataPackagerError):
    """Raised in strict mode when allowlisted objects were never produced."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Data objects not created by any file: {', '.join(names)}")


class DigestStoreError(DataPackagerError):
    """Raised when a persisted digest record cannot be read."""
