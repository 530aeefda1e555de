"""Tests for the filter algebra.

Validates:
- Leaf semantics (exists, eq)
- Vacuous truth of empty And / empty Or
- Left-to-right short-circuit order
- Error propagation through And / Or / Not
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from logroute import (
    And,
    Equals,
    FieldExists,
    FilterEvaluationError,
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


class Recorder:
    """Builds side-effecting filters that log their evaluation order."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def const(self, name: str, value: bool) -> Where:
        def predicate(_: Mapping[str, Any]) -> bool:
            self.calls.append(name)
            return value
        return where(predicate, name)

    def failing(self, name: str) -> Where:
        def predicate(_: Mapping[str, Any]) -> bool:
            self.calls.append(name)
            raise ValueError(f"{name} exploded")
        return where(predicate, name)


MSG = {"level": "info", "user": {"id": 1, "username": "admin"}, "activated": True, "gone": None}


# ─────────────────────────────────────────────────────────────────────────────
# Leaves
# ─────────────────────────────────────────────────────────────────────────────


def test_exists() -> None:
    assert exists("level").match(MSG)
    assert exists("user.id").match(MSG)
    assert exists("gone").match(MSG)
    assert not exists("user.email").match(MSG)
    assert not exists("level.name").match(MSG)


def test_eq() -> None:
    assert eq("level", "info").match(MSG)
    assert eq("user.id", 1).match(MSG)
    assert eq("user.id", 1.0).match(MSG)
    assert eq("gone", None).match(MSG)
    assert not eq("missing", None).match(MSG)
    assert not eq("activated", 1).match(MSG)
    assert eq("user", {"username": "admin", "id": 1}).match(MSG)


def test_constructors_build_variants() -> None:
    assert exists("a.b") == FieldExists(("a", "b"))
    assert eq("a", 1) == Equals(("a",), 1)
    assert not_(exists("a")) == Not(FieldExists(("a",)))
    assert isinstance(all_of(), And)
    assert isinstance(any_of(), Or)


def test_operators() -> None:
    a, b = exists("a"), exists("b")
    assert a & b == And((a, b))
    assert a | b == Or((a, b))
    assert ~a == Not(a)


def test_bad_path_is_accepted_and_never_matches() -> None:
    assert not exists("").match({"": 1})
    assert not eq("a..b", 1).match({"a": {"": {"b": 1}}})


# ─────────────────────────────────────────────────────────────────────────────
# Combinators
# ─────────────────────────────────────────────────────────────────────────────


def test_empty_and_matches_empty_or_does_not() -> None:
    assert all_of().match({})
    assert not any_of().match({})


def test_and_short_circuits_on_false() -> None:
    rec = Recorder()
    assert not all_of(rec.const("A", False), rec.const("B", True)).match({})
    assert rec.calls == ["A"]


def test_or_short_circuits_on_true() -> None:
    rec = Recorder()
    assert any_of(rec.const("A", True), rec.const("B", False)).match({})
    assert rec.calls == ["A"]


def test_evaluation_is_left_to_right() -> None:
    rec = Recorder()
    assert all_of(rec.const("A", True), rec.const("B", True), rec.const("C", True)).match({})
    assert not any_of(rec.const("D", False), rec.const("E", False)).match({})
    assert rec.calls == ["A", "B", "C", "D", "E"]


def test_not_negates() -> None:
    assert not_(eq("level", "debug")).match(MSG)
    assert not not_(eq("level", "info")).match(MSG)
    assert not_(not_(exists("user"))).match(MSG)


def test_nested_composition() -> None:
    flt = exists("user.id") & ~(eq("level", "debug") | eq("level", "trace"))
    assert flt.match(MSG)
    assert not flt.match({**MSG, "level": "trace"})
    assert not flt.match({"level": "info"})


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────


def test_predicate_error_is_wrapped() -> None:
    rec = Recorder()
    with pytest.raises(FilterEvaluationError) as info:
        rec.failing("A").match({})
    assert isinstance(info.value.__cause__, ValueError)
    assert "A exploded" in str(info.value)


def test_and_propagates_error_without_evaluating_rest() -> None:
    rec = Recorder()
    with pytest.raises(FilterEvaluationError):
        all_of(rec.const("A", True), rec.failing("B"), rec.const("C", True)).match({})
    assert rec.calls == ["A", "B"]


def test_or_propagates_error_without_evaluating_rest() -> None:
    rec = Recorder()
    with pytest.raises(FilterEvaluationError):
        any_of(rec.failing("A"), rec.const("B", True)).match({})
    assert rec.calls == ["A"]


def test_not_propagates_error_unchanged() -> None:
    rec = Recorder()
    inner = rec.failing("A")
    with pytest.raises(FilterEvaluationError) as direct:
        inner.match({})
    with pytest.raises(FilterEvaluationError) as negated:
        not_(inner).match({})
    assert type(direct.value) is type(negated.value)
    assert str(direct.value) == str(negated.value)


def test_eq_on_foreign_value_is_an_evaluation_error() -> None:
    with pytest.raises(FilterEvaluationError):
        eq("obj", 1).match({"obj": object()})


def test_filter_does_not_mutate_message() -> None:
    msg = {"user": {"id": 1}, "tags": ["a"]}
    snapshot = {"user": {"id": 1}, "tags": ["a"]}
    matches(exists("user.id") & eq("tags", ["a"]) & ~exists("x"), msg)
    assert msg == snapshot


def test_non_filter_is_rejected() -> None:
    with pytest.raises(TypeError):
        matches("level", {})  # type: ignore[arg-type]
