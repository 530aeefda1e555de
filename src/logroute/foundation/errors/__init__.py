"""Error handling for logroute.

- ErrorCode: delivery stage that failed
- DeliveryError: structured failure payload (pydantic)
- RoutingError and subclasses: FilterEvaluationError, FormatError, WriteError
- Result/Ok/Err: railway-oriented composition of delivery steps
"""

from .errors import (
    DeliveryError,
    ErrorCode,
    FilterEvaluationError,
    FormatError,
    RoutingError,
    WriteError,
)
from .result import Err, Ok, Result, try_fn

__all__ = [
    # Taxonomy
    "ErrorCode", "DeliveryError", "RoutingError",
    "FilterEvaluationError", "FormatError", "WriteError",
    # Result monad
    "Result", "Ok", "Err", "try_fn",
]
