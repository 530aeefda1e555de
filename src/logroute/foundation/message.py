"""Message model: field values, dotted paths and path resolution.

A message is a plain mapping of string keys to values drawn from a closed set
of kinds (see `ValueKind`). Comparison switches on the kind explicitly, so
`True` never equals `1` and nested containers compare structurally.

Example:
    >>> resolve({"user": {"id": 1}}, split_path("user.id"))
    (1, True)
    >>> resolve({"user": {"name": "x"}}, ("user", "id"))
    (None, False)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Any, TypeAlias

Fields: TypeAlias = dict[str, Any]
Path: TypeAlias = tuple[str, ...]

# Keys starting with the reserved prefix are metadata and never serialized
RESERVED_PREFIX = "_"
SORT_KEY = "_sort"

FIELD_TIME = "time"
FIELD_LOGGER = "logger"
FIELD_FILE = "file"

_NOT_FOUND: tuple[None, bool] = (None, False)


class ValueKind(StrEnum):
    """Closed set of value kinds a message may carry."""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    MESSAGE = "message"
    SEQUENCE = "sequence"


def kind_of(value: object) -> ValueKind:
    """Classify value. Raises TypeError for values outside the message model."""
    match value:
        case None:
            return ValueKind.NULL
        case bool():
            return ValueKind.BOOL
        case int() | float():
            return ValueKind.NUMBER
        case str():
            return ValueKind.STRING
        case Mapping():
            return ValueKind.MESSAGE
        case list() | tuple():
            return ValueKind.SEQUENCE
    raise TypeError(f"unsupported field value type: {type(value).__name__}")


def values_equal(a: object, b: object) -> bool:
    """Kind-aware equality. Different kinds never compare equal."""
    kind = kind_of(a)
    if kind is not kind_of(b):
        return False
    match kind:
        case ValueKind.NULL:
            return True
        case ValueKind.BOOL | ValueKind.NUMBER | ValueKind.STRING:
            return a == b
        case ValueKind.MESSAGE:
            return _mappings_equal(a, b)  # type: ignore[arg-type]
        case ValueKind.SEQUENCE:
            return _sequences_equal(a, b)  # type: ignore[arg-type]
    return False


def _mappings_equal(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    if a.keys() != b.keys():
        return False
    return all(values_equal(v, b[k]) for k, v in a.items())


def _sequences_equal(a: Sequence[Any], b: Sequence[Any]) -> bool:
    return len(a) == len(b) and all(values_equal(x, y) for x, y in zip(a, b))


def split_path(path: str | Sequence[str]) -> Path:
    """Turn "a.b.c" (or an iterable of segments) into a path tuple.

    Never fails: empty paths and empty segments are kept and simply never resolve.
    """
    if isinstance(path, str):
        return tuple(path.split("."))
    return tuple(path)


def resolve(message: Mapping[str, Any], path: Path) -> tuple[Any, bool]:
    """Walk path through nested messages. Returns (value, found).

    Missing keys and non-message intermediates give (None, False); nothing raises.
    """
    if not path:
        return _NOT_FOUND
    current: Any = message
    for key in path:
        if not key or not isinstance(current, Mapping) or key not in current:
            return _NOT_FOUND
        current = current[key]
    return current, True


def is_reserved(key: str) -> bool:
    return key.startswith(RESERVED_PREFIX)
