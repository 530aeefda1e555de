"""Delivery error taxonomy for the router.

Every failure at a destination is classified (filter, format, write) and
carried as a structured `DeliveryError` payload inside a `RoutingError`
exception. Failures are reported to the router's error hook only; they never
escape `Router.log`.
"""

from __future__ import annotations

import traceback
from enum import StrEnum
from typing import Annotated, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ErrorCode(StrEnum):
    """Which stage of delivery failed."""
    FILTER_FAILED = "FILTER_FAILED"
    FORMAT_FAILED = "FORMAT_FAILED"
    WRITE_FAILED = "WRITE_FAILED"
    UNKNOWN = "UNKNOWN"


class DeliveryError(BaseModel):
    """Structured description of a failed delivery to one destination.

    Attributes:
        destination_id: Id of the destination that failed
        message: Human-readable error message
        code: Stage that failed
        details: Optional traceback text of the underlying exception
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Delivery Error",
            "examples": [{
                "destination_id": "stdout",
                "message": "Type is not JSON serializable: object",
                "code": "FORMAT_FAILED",
            }],
        },
    )

    destination_id: str = Field(default="", description="Destination the record was bound for")
    message: Annotated[str, Field(min_length=1)]
    code: ErrorCode = ErrorCode.UNKNOWN
    details: str | None = Field(default=None, repr=False)

    @computed_field
    @property
    def stage(self) -> str:
        """Lower-case stage name (filter, format, write, unknown)."""
        return self.code.value.split("_", 1)[0].lower()

    def render(self) -> str:
        dest = f" [{self.destination_id}]" if self.destination_id else ""
        text = f"{self.stage} error{dest}: {self.message}"
        return f"{text}\n{self.details}" if self.details else text

    __str__ = render


class RoutingError(Exception):
    """Exception wrapping a DeliveryError. Base of the delivery taxonomy."""

    code: ClassVar[ErrorCode] = ErrorCode.UNKNOWN

    def __init__(self, error: DeliveryError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def destination_id(self) -> str:
        return self.error.destination_id

    @classmethod
    def create(cls, message: str, destination_id: str = "") -> Self:
        return cls(DeliveryError(destination_id=destination_id, message=message, code=cls.code))

    @classmethod
    def from_exc(cls, exc: BaseException, destination_id: str = "", *, include_trace: bool = False) -> Self:
        """Wrap exc, chaining it as __cause__."""
        details = "".join(traceback.format_exception(exc)) if include_trace else None
        err = cls(DeliveryError(
            destination_id=destination_id,
            message=str(exc) or type(exc).__name__,
            code=cls.code,
            details=details,
        ))
        err.__cause__ = exc
        return err

    def for_destination(self, destination_id: str) -> Self:
        """Copy of this error bound to destination_id (cause preserved)."""
        err = type(self)(self.error.model_copy(update={"destination_id": destination_id}))
        err.__cause__ = self.__cause__
        return err


class FilterEvaluationError(RoutingError):
    """A filter predicate could not be evaluated."""
    code = ErrorCode.FILTER_FAILED


class FormatError(RoutingError):
    """A message could not be serialized."""
    code = ErrorCode.FORMAT_FAILED


class WriteError(RoutingError):
    """Writing a record to a sink failed."""
    code = ErrorCode.WRITE_FAILED
