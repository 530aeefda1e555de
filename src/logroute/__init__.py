"""logroute - structured logging with filtered, per-destination routing.

A message is a plain mapping of fields. Loggers stamp standard fields
(time, logger name, call site) onto it; a Router then delivers it to every
registered destination whose filter matches, formatted as one line per record.

Quick Start:
    >>> import io
    >>> from logroute import Router, LoggerConfig, FileLine, eq, not_
    >>>
    >>> router = Router()
    >>> buf = io.BytesIO()
    >>> _ = router.register("app", buf, filter=not_(eq("level", "debug")))
    >>> router.on_error(lambda dest, sink, err: print(dest, err))
    >>>
    >>> log = LoggerConfig(name="api", file_line=FileLine.SHORT, sort_fields=True, router=router).new_logger()
    >>> log.log({"level": "info", "user": {"id": 1, "username": "admin"}})
    >>> log.log({"level": "debug", "details": "..."})  # filtered out

Reconfiguration at runtime:
    >>> _ = router.register("app", buf)  # same id: filter removed
    >>> _ = router.register("app", None)  # disabled, entry kept

Filters:
    >>> flt = exists("user.id") & (eq("level", "error") | eq("level", "warning"))
    >>> flt.match({"level": "error", "user": {"id": 7}})
    True
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"

# Foundation
from .foundation import (
    FIELD_FILE,
    FIELD_LOGGER,
    FIELD_TIME,
    RESERVED_PREFIX,
    SORT_KEY,
    DeliveryError,
    Err,
    ErrorCode,
    Fields,
    FilterEvaluationError,
    FormatError,
    Ok,
    Result,
    RoutingError,
    ValueKind,
    WriteError,
    resolve,
    split_path,
    values_equal,
)

# Filters
from .filters import (
    And,
    Equals,
    FieldExists,
    Filter,
    Not,
    Or,
    Where,
    all_of,
    any_of,
    eq,
    exists,
    matches,
    not_,
    where,
)

# Formatting & output
from .formatters import DEFAULT_FORMATTER, Formatter, JsonFormatter, TextFormatter
from .sinks import Sink, TextSink

# Routing
from .router import SEPARATOR, Destination, ErrorHandler, Router
from . import defaults
from .defaults import default_router, set_default_router

# Loggers
from .logger import FileLine, Logger, LoggerConfig, TimeFormat, format_time, get_logger

logging.getLogger("logroute").addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Message
    "Fields", "ValueKind", "resolve", "split_path", "values_equal",
    "RESERVED_PREFIX", "SORT_KEY", "FIELD_TIME", "FIELD_LOGGER", "FIELD_FILE",
    # Errors
    "ErrorCode", "DeliveryError", "RoutingError",
    "FilterEvaluationError", "FormatError", "WriteError",
    "Result", "Ok", "Err",
    # Filters
    "Filter", "FieldExists", "Equals", "And", "Or", "Not", "Where", "matches",
    "exists", "eq", "all_of", "any_of", "not_", "where",
    # Formatting & output
    "Formatter", "JsonFormatter", "TextFormatter", "DEFAULT_FORMATTER",
    "Sink", "TextSink",
    # Routing
    "Router", "Destination", "ErrorHandler", "SEPARATOR",
    "defaults", "default_router", "set_default_router",
    # Loggers
    "Logger", "LoggerConfig", "FileLine", "TimeFormat", "format_time", "get_logger",
]
