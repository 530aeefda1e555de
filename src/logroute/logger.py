"""Loggers: stamp standard fields onto a message, then hand it to a router.

For every call the logger adds, only when the key is not already present:

- `time`: formatted per `time_format` (strftime pattern, RFC 3339, or epoch int)
- `logger`: the logger name (when non-empty)
- `file`: `file.py:line` of the call site (short or long form)
- `_sort`: metadata flag asking formatters for sorted keys

The caller's mapping is never mutated.

Quick Start:
    >>> router = Router()
    >>> _ = router.register("stdout", TextSink())
    >>> log = LoggerConfig(name="api", file_line=FileLine.SHORT, router=router).new_logger()
    >>> log.log({"level": "info", "user": {"id": 1}})
    >>> log.info("listening", port=8080)
"""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .defaults import default_router
from .foundation.message import FIELD_FILE, FIELD_LOGGER, FIELD_TIME, SORT_KEY, Fields
from .router import Router

FIELD_LEVEL = "level"
FIELD_MSG = "msg"

_NS = 1_000_000_000


class FileLine(StrEnum):
    """Call-site field mode."""
    OFF = "off"
    SHORT = "short"  # final path component
    LONG = "long"  # full path


class TimeFormat(StrEnum):
    """Named timestamp encodings. Any other string is used as a strftime pattern."""
    DEFAULT = "%Y-%m-%d %H:%M:%S.%f"
    RFC3339 = "rfc3339"
    RFC3339_NANO = "rfc3339nano"
    UNIX = "unix"
    UNIX_NANO = "unixnano"


def format_time(ns: int, fmt: str, *, utc: bool = True) -> str | int:
    """Encode an epoch-nanosecond timestamp.

    Example:
        >>> format_time(1_486_158_203_000_000_000, TimeFormat.RFC3339)
        '2017-02-03T21:43:23Z'
        >>> format_time(1_486_158_203_000_000_000, TimeFormat.UNIX)
        1486158203
    """
    if fmt == TimeFormat.UNIX:
        return ns // _NS
    if fmt == TimeFormat.UNIX_NANO:
        return ns

    secs, frac = divmod(ns, _NS)
    dt = datetime.fromtimestamp(secs, tz=UTC).replace(microsecond=frac // 1000)
    if not utc:
        dt = dt.astimezone()

    if fmt == TimeFormat.RFC3339:
        return f"{dt:%Y-%m-%dT%H:%M:%S}{_zone(dt, utc)}"
    if fmt == TimeFormat.RFC3339_NANO:
        digits = f".{frac:09d}".rstrip("0") if frac else ""
        return f"{dt:%Y-%m-%dT%H:%M:%S}{digits}{_zone(dt, utc)}"
    return dt.strftime(fmt)


def _zone(dt: datetime, utc: bool) -> str:
    if utc:
        return "Z"
    offset = dt.strftime("%z")  # +HHMM
    return f"{offset[:3]}:{offset[3:5]}" if offset else "Z"


def _call_site(mode: FileLine, depth: int) -> str:
    """`file:line` of the frame `depth` levels above the caller."""
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return "???:0"
    path = frame.f_code.co_filename
    return f"{os.path.basename(path) if mode is FileLine.SHORT else path}:{frame.f_lineno}"


# ═════════════════════════════════════════════════════════════════════════════
# Configuration
# ═════════════════════════════════════════════════════════════════════════════


class LoggerConfig(BaseModel):
    """Validated logger configuration.

    Attributes:
        name: Value of the `logger` field (omitted when empty)
        time_format: TimeFormat member or strftime pattern; None disables `time`
        utc: Render timestamps in UTC rather than the local zone
        file_line: Include the call site as `file`
        sort_fields: Ask formatters to emit keys in increasing order
        router: Target router; None uses the process default at call time
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    name: str = ""
    time_format: str | None = Field(default=TimeFormat.DEFAULT)
    utc: bool = True
    file_line: FileLine = FileLine.OFF
    sort_fields: bool = False
    router: Router | None = None

    @field_validator("time_format", mode="before")
    @classmethod
    def _blank_disables(cls, v: str | None) -> str | None:
        return v or None

    def new_logger(self, **bound: Any) -> Logger:
        return Logger(self, **bound)


# ═════════════════════════════════════════════════════════════════════════════
# Logger
# ═════════════════════════════════════════════════════════════════════════════


class Logger:
    """Enriches messages per its config and forwards them to a router.

    Bound fields (see `bind`) are merged under the call's own fields.
    """

    __slots__ = ("_config", "_bound")

    def __init__(self, config: LoggerConfig | None = None, **bound: Any) -> None:
        self._config = config or LoggerConfig()
        self._bound: Fields = bound

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    def bind(self, **fields: Any) -> Self:
        """New logger with additional bound fields."""
        return type(self)(self._config, **{**self._bound, **fields})

    def log(self, fields: Mapping[str, Any] | None = None) -> None:
        """Enrich a copy of fields and route it."""
        self._emit(fields, depth=1)

    def debug(self, msg: str, **fields: Any) -> None:
        self._emit({FIELD_LEVEL: "debug", FIELD_MSG: msg, **fields}, depth=1)

    def info(self, msg: str, **fields: Any) -> None:
        self._emit({FIELD_LEVEL: "info", FIELD_MSG: msg, **fields}, depth=1)

    def warning(self, msg: str, **fields: Any) -> None:
        self._emit({FIELD_LEVEL: "warning", FIELD_MSG: msg, **fields}, depth=1)

    def error(self, msg: str, **fields: Any) -> None:
        self._emit({FIELD_LEVEL: "error", FIELD_MSG: msg, **fields}, depth=1)

    def _emit(self, fields: Mapping[str, Any] | None, depth: int) -> None:
        now = time.time_ns()  # before any other work
        cfg = self._config
        message: Fields = {**self._bound, **(fields or {})}

        if cfg.time_format is not None and FIELD_TIME not in message:
            message[FIELD_TIME] = format_time(now, cfg.time_format, utc=cfg.utc)
        if cfg.name and FIELD_LOGGER not in message:
            message[FIELD_LOGGER] = cfg.name
        if cfg.file_line is not FileLine.OFF and FIELD_FILE not in message:
            message[FIELD_FILE] = _call_site(cfg.file_line, depth + 1)
        if cfg.sort_fields and SORT_KEY not in message:
            message[SORT_KEY] = True

        (cfg.router or default_router()).log(message)

    def __repr__(self) -> str:
        return f"Logger(name={self.name!r}, bound={sorted(self._bound)})"


def get_logger(name: str = "", *, router: Router | None = None, **config: Any) -> Logger:
    """Shorthand for `LoggerConfig(name=..., router=..., **config).new_logger()`."""
    return LoggerConfig(name=name, router=router, **config).new_logger()
