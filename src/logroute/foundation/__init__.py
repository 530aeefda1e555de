"""Foundation: message model, path resolution and error taxonomy."""

from .errors import (
    DeliveryError,
    Err,
    ErrorCode,
    FilterEvaluationError,
    FormatError,
    Ok,
    Result,
    RoutingError,
    WriteError,
    try_fn,
)
from .message import (
    FIELD_FILE,
    FIELD_LOGGER,
    FIELD_TIME,
    RESERVED_PREFIX,
    SORT_KEY,
    Fields,
    Path,
    ValueKind,
    is_reserved,
    kind_of,
    resolve,
    split_path,
    values_equal,
)

__all__ = [
    "DeliveryError", "ErrorCode", "RoutingError",
    "FilterEvaluationError", "FormatError", "WriteError",
    "Result", "Ok", "Err", "try_fn",
    "Fields", "Path", "ValueKind", "kind_of", "values_equal",
    "split_path", "resolve", "is_reserved",
    "RESERVED_PREFIX", "SORT_KEY", "FIELD_TIME", "FIELD_LOGGER", "FIELD_FILE",
]
