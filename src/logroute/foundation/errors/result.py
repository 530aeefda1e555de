"""Success/failure values for the per-destination delivery pipeline.

Each delivery step (select → render → emit) returns a Result. Steps are
chained with `flat_map`: the first Err skips every later step and is what
the router hands to the error hook.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


class Result(Generic[T, E]):
    """Outcome of one delivery step: Ok(value) or Err(error)."""

    __slots__ = ("_value", "_failed")

    def __init__(self, value: T | E, failed: bool) -> None:
        self._value = value
        self._failed = failed

    def is_err(self) -> bool:
        return self._failed

    def unwrap_err(self) -> E:
        """The carried error. Raises RuntimeError on Ok."""
        if not self._failed:
            raise RuntimeError(f"unwrap_err() on {self!r}")
        return self._value  # type: ignore[return-value]

    def flat_map(self, step: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Run the next step on an Ok value; pass an Err through untouched."""
        if self._failed:
            return self  # type: ignore[return-value]
        return step(self._value)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"{'Err' if self._failed else 'Ok'}({self._value!r})"


def Ok(value: T) -> Result[T, E]:  # noqa: N802
    return Result(value, False)


def Err(error: E) -> Result[T, E]:  # noqa: N802
    return Result(error, True)


def try_fn(fn: Callable[[], T], on_error: Callable[[Exception], E]) -> Result[T, E]:
    """Run fn; an Exception becomes Err(on_error(exc))."""
    try:
        return Ok(fn())
    except Exception as exc:
        return Err(on_error(exc))
