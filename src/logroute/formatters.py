"""Formatters: turn a message into the bytes of one record.

A formatter never appends the record separator; the router does. Failures
surface as FormatError so the router can report them per destination.

Usage:
    >>> JsonFormatter().format({"b": 2, "a": 1, "_sort": True})
    b'{"a":1,"b":2}'
    >>> TextFormatter().format({"level": "info", "msg": "hello world"})
    b'level=info msg="hello world"'
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import orjson

from .foundation.errors import FormatError
from .foundation.message import FIELD_LOGGER, FIELD_TIME, SORT_KEY, RESERVED_PREFIX


@runtime_checkable
class Formatter(Protocol):
    """Protocol for message serializers."""

    def format(self, message: Mapping[str, Any]) -> bytes: ...


def _visible(message: Mapping[str, Any]) -> dict[Any, Any]:
    """Copy of message without reserved (metadata) keys."""
    return {k: v for k, v in message.items() if not (isinstance(k, str) and k.startswith(RESERVED_PREFIX))}


def _wants_sort(message: Mapping[str, Any]) -> bool:
    return message.get(SORT_KEY) is True


def _default(obj: Any) -> Any:
    """orjson fallback: read-only mappings (MappingProxyType etc.) encode as objects."""
    if isinstance(obj, Mapping):
        return dict(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


# ═══════════════════════════════════════════════════════════════════════════════
# Formatter Implementations
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class JsonFormatter:
    """Compact single-line JSON object via orjson.

    Keys are emitted in lexicographic order when the message carries a true
    `_sort` flag; otherwise in insertion order. Reserved keys are dropped.

    Integers must fit in 64 bits (signed or unsigned); larger values raise
    FormatError, since orjson refuses to encode them.
    """

    def format(self, message: Mapping[str, Any]) -> bytes:
        option = orjson.OPT_SORT_KEYS if _wants_sort(message) else 0
        try:
            return orjson.dumps(_visible(message), default=_default, option=option)
        except (orjson.JSONEncodeError, TypeError, ValueError) as exc:
            raise FormatError.from_exc(exc) from exc


_BARE = re.compile(r"^[^\s=\"]+$")

_COLORS = {"reset": "\033[0m", "dim": "\033[2m", "cyan": "\033[36m"}
_NO_COLORS = {k: "" for k in _COLORS}


@dataclass(frozen=True, slots=True)
class TextFormatter:
    """Human-readable `key=value` line for consoles.

    `time` and `logger` lead when present; remaining keys are sorted. Strings
    containing spaces, quotes or `=` are JSON-quoted; containers are JSON.
    """

    colors: bool = False

    def format(self, message: Mapping[str, Any]) -> bytes:
        c = _COLORS if self.colors else _NO_COLORS
        fields = _visible(message)
        head = [k for k in (FIELD_TIME, FIELD_LOGGER) if k in fields]
        try:
            rest = sorted(k for k in fields if k not in head)
            parts = [f"{c['cyan']}{k}{c['reset']}={_text_value(fields[k])}" for k in (*head, *rest)]
        except (orjson.JSONEncodeError, TypeError, ValueError) as exc:
            raise FormatError.from_exc(exc) from exc
        return " ".join(parts).encode()


def _text_value(v: Any) -> str:
    if isinstance(v, str):
        return v if _BARE.match(v) else orjson.dumps(v).decode()
    if v is None or isinstance(v, (bool, int, float)):
        return orjson.dumps(v).decode()
    return orjson.dumps(v, default=_default, option=orjson.OPT_SORT_KEYS).decode()


# Shared default instance; formatters are stateless
DEFAULT_FORMATTER: Formatter = JsonFormatter()
