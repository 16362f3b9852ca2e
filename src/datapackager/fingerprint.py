"""Content fingerprints for data objects.

Each object is reduced to a canonical JSON-compatible form and hashed with
SHA-256. The canonical form depends only on logical content: mapping and set
members are sorted, so insertion order never changes a digest. Every
container other than a plain list is wrapped in a single-key tag object
({"tuple": [...]}, {"map": [...]}, ...) so that, for example, a tuple and a
list with the same items digest differently.

Additional types can be supported with ``canonicalize.register``:

    @canonicalize.register
    def _(value: MyType) -> Any:
        return {"mytype": canonicalize(value.payload)}
"""

import dataclasses
import hashlib
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import singledispatch
from pathlib import PurePath
from typing import Any

from datapackager.errors import UnserializableObjectError
from datapackager.models import DataVersion, FingerprintRecord

logger = logging.getLogger(__name__)


def _dumps(value: Any) -> str:
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=True,
    )


def _qualified_name(obj: Any) -> str:
    cls = type(obj)
    return f"{cls.__module__}.{cls.__qualname__}"


def _labelled_form(value: Any) -> Any | None:
    """Canonical form of a labelled table or series (e.g. pandas), or None.

    Row labels, column labels and values are kept in order, so duplicate
    labels never collapse rows or columns together.
    """
    index = getattr(value, "index", None)
    if index is None or callable(index):
        return None

    to_dict = getattr(value, "to_dict", None)
    if getattr(value, "columns", None) is not None and callable(to_dict):
        split = to_dict(orient="split")
        return {
            "table": [
                _qualified_name(value),
                canonicalize(split["index"]),
                canonicalize(split["columns"]),
                canonicalize(split["data"]),
            ]
        }

    tolist = getattr(value, "tolist", None)
    if callable(tolist):
        return {"series": [_qualified_name(value), canonicalize(index), canonicalize(tolist())]}
    return None


def _enum_form(value: Enum) -> Any:
    return {"enum": [_qualified_name(value), canonicalize(value.value)]}


@singledispatch
def canonicalize(value: Any) -> Any:
    """Reduce an object to its canonical JSON-compatible form.

    Args:
        value: Object to canonicalize

    Returns:
        Nested structure of str, int, float, bool, None, list and
        single-key tag dicts

    Raises:
        UnserializableObjectError: If the object has no canonical form
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        return {"dataclass": [_qualified_name(value), canonicalize(fields)]}

    labelled = _labelled_form(value)
    if labelled is not None:
        return labelled

    # Other table-like objects expose their content as a dict
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return {"object": [_qualified_name(value), canonicalize(to_dict())]}

    # Array-likes and their scalars
    tolist = getattr(value, "tolist", None)
    if callable(tolist):
        return canonicalize(tolist())

    raise UnserializableObjectError(_qualified_name(value))


@canonicalize.register(type(None))
def _(value: None) -> Any:
    return None


@canonicalize.register(bool)
def _(value: bool) -> Any:
    return value


@canonicalize.register(int)
def _(value: int) -> Any:
    # IntEnum and other int-mixin enums dispatch here before Enum
    if isinstance(value, Enum):
        return _enum_form(value)
    return int(value)


@canonicalize.register(float)
def _(value: float) -> Any:
    if isinstance(value, Enum):
        return _enum_form(value)
    return float(value)


@canonicalize.register(str)
def _(value: str) -> Any:
    if isinstance(value, Enum):
        return _enum_form(value)
    return str(value)


@canonicalize.register(bytes)
@canonicalize.register(bytearray)
def _(value: bytes | bytearray) -> Any:
    return {"bytes": bytes(value).hex()}


@canonicalize.register(list)
def _(value: list) -> Any:
    return [canonicalize(item) for item in value]


@canonicalize.register(tuple)
def _(value: tuple) -> Any:
    items = [canonicalize(item) for item in value]
    if hasattr(value, "_fields"):
        return {"namedtuple": [_qualified_name(value), list(value._fields), items]}
    return {"tuple": items}


@canonicalize.register(set)
@canonicalize.register(frozenset)
def _(value: set | frozenset) -> Any:
    return {"set": sorted((canonicalize(item) for item in value), key=_dumps)}


@canonicalize.register(Mapping)
def _(value: Mapping) -> Any:
    pairs = [[canonicalize(k), canonicalize(v)] for k, v in value.items()]
    return {"map": sorted(pairs, key=lambda pair: _dumps(pair[0]))}


@canonicalize.register(Enum)
def _(value: Enum) -> Any:
    return _enum_form(value)


@canonicalize.register(date)
def _(value: date) -> Any:
    return {"date": value.isoformat()}


@canonicalize.register(datetime)
def _(value: datetime) -> Any:
    return {"datetime": value.isoformat()}


@canonicalize.register(Decimal)
def _(value: Decimal) -> Any:
    return {"decimal": str(value)}


@canonicalize.register(PurePath)
def _(value: PurePath) -> Any:
    return {"path": value.as_posix()}


def digest(value: Any) -> str:
    """Compute the content digest of an object.

    Args:
        value: Object to fingerprint

    Returns:
        SHA-256 hex digest (64 characters)

    Raises:
        UnserializableObjectError: If the object has no canonical form
    """
    try:
        canonical = canonicalize(value)
    except RecursionError as e:
        raise UnserializableObjectError(_qualified_name(value)) from e

    payload = _dumps(canonical).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def digest_all(objects: Mapping[str, Any], version: DataVersion) -> FingerprintRecord:
    """Fingerprint every object in a name to object mapping.

    Args:
        objects: Object name to value
        version: Data version to attach to the record

    Returns:
        FingerprintRecord for the objects

    Raises:
        UnserializableObjectError: Naming the first object that cannot be digested
    """
    digests: dict[str, str] = {}
    for name in sorted(objects):
        try:
            digests[name] = digest(objects[name])
        except UnserializableObjectError as e:
            raise UnserializableObjectError(e.type_name, name=name) from e
        logger.debug("Digest %s: %s", name, digests[name])

    return FingerprintRecord(digests=digests, version=version)


def records_equal(a: FingerprintRecord, b: FingerprintRecord) -> bool:
    """Compare the digests of two records as sets of (name, digest) pairs.

    Versions are not compared.
    """
    return set(a.digests.items()) == set(b.digests.items())


@dataclass
class RecordDiff:
    """Object-level difference between two fingerprint records."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


def diff_records(old: FingerprintRecord, new: FingerprintRecord) -> RecordDiff:
    """List objects added, removed or changed between two records."""
    old_names = set(old.digests)
    new_names = set(new.digests)

    return RecordDiff(
        added=sorted(new_names - old_names),
        removed=sorted(old_names - new_names),
        changed=sorted(
            name
            for name in old_names & new_names
            if old.digests[name] != new.digests[name]
        ),
    )
