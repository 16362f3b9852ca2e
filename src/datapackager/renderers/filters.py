"""Jinja2 filters describing data objects in documentation stubs.

Filters only inspect an object's shape; they never fail on unfamiliar types
and fall back to a generic description instead.
"""

import dataclasses
from collections.abc import Mapping, Sized
from typing import Any

# Longest field list written into a stub
MAX_FIELDS = 50


def type_name(value: Any) -> str:
    """Return a readable type name, module-qualified outside builtins."""
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def size_summary(value: Any) -> str:
    """Describe the size of an object.

    Examples:
        "A DataFrame with 32 rows and 11 columns"
        "A list with 10 items"
        "A dict with 3 keys"
        "An int"
    """
    name = type(value).__qualname__
    article = "An" if name[:1].lower() in "aeiou" else "A"

    shape = getattr(value, "shape", None)
    if isinstance(shape, tuple) and len(shape) == 2:
        return f"{article} {name} with {shape[0]} rows and {shape[1]} columns"

    if isinstance(value, Mapping):
        return f"{article} {name} with {len(value)} keys"

    if isinstance(value, Sized) and not isinstance(value, (str, bytes)):
        return f"{article} {name} with {len(value)} items"

    return f"{article} {name}"


def field_names(value: Any) -> list[str]:
    """List the named fields of an object for a stub's field table.

    Columns of table-like objects, fields of dataclasses and namedtuples,
    and string keys of mappings. Empty for anything else.
    """
    names: list[str] = []

    columns = getattr(value, "columns", None)
    if columns is not None and not callable(columns):
        names = [str(c) for c in columns]
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        names = [f.name for f in dataclasses.fields(value)]
    elif isinstance(value, tuple) and hasattr(value, "_fields"):
        names = list(value._fields)
    elif isinstance(value, Mapping) and all(isinstance(k, str) for k in value):
        names = list(value)

    return names[:MAX_FIELDS]


FILTERS = {
    "type_name": type_name,
    "size_summary": size_summary,
    "field_names": field_names,
}
