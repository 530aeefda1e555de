"""Composable boolean filters over log messages.

A filter is one of a closed set of immutable variants, evaluated by the single
recursive `matches` function:

- FieldExists(path): the path resolves (even to None)
- Equals(path, value): the path resolves to a value equal to `value`
- And(filters): all match; left to right, stops at the first False
- Or(filters): any matches; left to right, stops at the first True
- Not(filter): negation
- Where(predicate): caller-supplied predicate over the message

Errors raised while evaluating propagate unchanged through And/Or/Not, so the
router sees exactly one FilterEvaluationError per failed evaluation.

Example:
    >>> visible = not_(eq("level", "debug")) & exists("user.id")
    >>> visible.match({"level": "info", "user": {"id": 7}})
    True
    >>> (eq("level", "debug") | eq("level", "trace")).match({"level": "info"})
    False
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias, Union

from .foundation.errors import FilterEvaluationError
from .foundation.message import Path, resolve, split_path, values_equal

Predicate = Callable[[Mapping[str, Any]], bool]


class _FilterOps:
    """Operator sugar shared by all variants: & | ~ and .match()."""

    __slots__ = ()

    def __and__(self, other: Filter) -> And:
        return And((self, other))  # type: ignore[arg-type]

    def __or__(self, other: Filter) -> Or:
        return Or((self, other))  # type: ignore[arg-type]

    def __invert__(self) -> Not:
        return Not(self)  # type: ignore[arg-type]

    def match(self, message: Mapping[str, Any]) -> bool:
        return matches(self, message)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class FieldExists(_FilterOps):
    path: Path


@dataclass(frozen=True, slots=True)
class Equals(_FilterOps):
    path: Path
    value: Any


@dataclass(frozen=True, slots=True)
class And(_FilterOps):
    filters: tuple[Filter, ...] = ()


@dataclass(frozen=True, slots=True)
class Or(_FilterOps):
    filters: tuple[Filter, ...] = ()


@dataclass(frozen=True, slots=True)
class Not(_FilterOps):
    filter: Filter


@dataclass(frozen=True, slots=True)
class Where(_FilterOps):
    """Escape hatch for predicates the built-in variants can't express.

    Exceptions raised by the predicate surface as FilterEvaluationError.
    """

    predicate: Predicate
    name: str = ""


Filter: TypeAlias = Union[FieldExists, Equals, And, Or, Not, Where]


# ═════════════════════════════════════════════════════════════════════════════
# Evaluation
# ═════════════════════════════════════════════════════════════════════════════


def matches(flt: Filter, message: Mapping[str, Any]) -> bool:
    """Evaluate flt against message. Pure; never mutates the message.

    Raises:
        FilterEvaluationError: a comparison or predicate could not be evaluated
    """
    match flt:
        case FieldExists(path):
            return resolve(message, path)[1]
        case Equals(path, expected):
            value, found = resolve(message, path)
            if not found:
                return False
            try:
                return values_equal(value, expected)
            except TypeError as exc:
                raise FilterEvaluationError.from_exc(exc) from exc
        case And(filters):
            for sub in filters:
                if not matches(sub, message):
                    return False
            return True
        case Or(filters):
            for sub in filters:
                if matches(sub, message):
                    return True
            return False
        case Not(inner):
            return not matches(inner, message)
        case Where(predicate, name):
            try:
                return bool(predicate(message))
            except FilterEvaluationError:
                raise
            except Exception as exc:
                label = f"{name}: " if name else ""
                raise FilterEvaluationError.create(f"{label}{exc or type(exc).__name__}") from exc
    raise TypeError(f"not a filter: {flt!r}")


# ═════════════════════════════════════════════════════════════════════════════
# Constructors
# ═════════════════════════════════════════════════════════════════════════════


def exists(path: str | Sequence[str]) -> FieldExists:
    """Match messages where path resolves. "a.b" addresses nested fields."""
    return FieldExists(split_path(path))


def eq(path: str | Sequence[str], value: Any) -> Equals:
    """Match messages where path resolves to a value equal to value."""
    return Equals(split_path(path), value)


def all_of(*filters: Filter) -> And:
    """AND. all_of() with no arguments matches everything."""
    return And(filters)


def any_of(*filters: Filter) -> Or:
    """OR. any_of() with no arguments matches nothing."""
    return Or(filters)


def not_(flt: Filter) -> Not:
    return Not(flt)


def where(predicate: Predicate, name: str = "") -> Where:
    return Where(predicate, name or getattr(predicate, "__name__", ""))
