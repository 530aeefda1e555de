"""Destination registry and dispatcher.

A Router maps destination ids to (sink, formatter, filter) triples and
delivers every logged message to each enabled destination whose filter
matches. Delivery to one destination is a three-step railway:

    select (filter) → render (formatter) → emit (sink write + separator)

The first failing step short-circuits the rest and is reported to the error
hook; other destinations are unaffected and `log` never raises.

Thread safety:
- Registry reads/writes are serialized by one lock; `log` works on a snapshot,
  so a re-registration is observed either entirely or not at all.
- Each destination id owns a write lock; concurrent `log` calls never
  interleave bytes of two records on the same destination.

Example:
    >>> router = Router()
    >>> buf = io.BytesIO()
    >>> _ = router.register("mem", buf, filter=not_(eq("level", "debug")))
    >>> router.log({"level": "info", "msg": "up"})
    >>> buf.getvalue()
    b'{"level":"info","msg":"up"}\\n'
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeAlias

from .filters import Filter, matches
from .formatters import DEFAULT_FORMATTER, Formatter
from .foundation.errors import (
    FilterEvaluationError,
    FormatError,
    Ok,
    Result,
    RoutingError,
    WriteError,
    try_fn,
)
from .sinks import Sink

logger = logging.getLogger("logroute.router")

ErrorHandler: TypeAlias = Callable[[str, "Sink | None", RoutingError], None]

# Record separator written after every formatted record
SEPARATOR = b"\n"

_EMPTY: Mapping[str, Any] = MappingProxyType({})

# Set while this thread is inside an error hook; nested failures are dropped
_reporting = threading.local()


@dataclass(frozen=True, slots=True)
class Destination:
    """A named output. `sink=None` means registered but disabled."""

    id: str
    sink: Sink | None
    formatter: Formatter
    filter: Filter | None = None

    @property
    def enabled(self) -> bool:
        return self.sink is not None


class Router:
    """Registry of destinations plus the dispatch loop.

    Args:
        default_formatter: Formatter given to destinations registered without
            one. Resolved at registration time; changing it later does not
            affect existing destinations.
    """

    __slots__ = ("_destinations", "_write_locks", "_lock", "_on_error", "_default_formatter")

    def __init__(self, default_formatter: Formatter | None = None) -> None:
        self._destinations: dict[str, Destination] = {}
        self._write_locks: dict[str, threading.Lock] = {}
        self._lock = threading.RLock()
        self._on_error: ErrorHandler | None = None
        self._default_formatter: Formatter = default_formatter or DEFAULT_FORMATTER

    # ─────────────────────────────────────────────────────────────────
    # Registry
    # ─────────────────────────────────────────────────────────────────

    def register(
        self,
        id: str,  # noqa: A002 - matches Destination.id
        sink: Sink | None,
        formatter: Formatter | None = None,
        filter: Filter | None = None,  # noqa: A002
    ) -> Destination:
        """Create or fully replace the destination `id`.

        Every call replaces sink, formatter and filter together. Pass
        `sink=None` to disable the destination while keeping its entry.
        """
        with self._lock:
            dest = Destination(id, sink, formatter or self._default_formatter, filter)
            self._destinations[id] = dest
            self._write_locks.setdefault(id, threading.Lock())
        logger.debug("registered destination %r (enabled=%s, filtered=%s)", id, dest.enabled, filter is not None)
        return dest

    def unregister(self, id: str) -> bool:  # noqa: A002
        """Remove a destination. Returns True if it existed."""
        with self._lock:
            # The write lock is kept: an in-flight log may still hold it, and a
            # later register of the same id must serialize against that log.
            # One lock per id ever registered is retained for the router's life.
            removed = self._destinations.pop(id, None) is not None
        if removed:
            logger.debug("unregistered destination %r", id)
        return removed

    def get(self, id: str) -> Destination | None:  # noqa: A002
        with self._lock:
            return self._destinations.get(id)

    def destinations(self) -> tuple[Destination, ...]:
        """Snapshot of all registered destinations."""
        with self._lock:
            return tuple(self._destinations.values())

    def __contains__(self, id: object) -> bool:  # noqa: A002
        with self._lock:
            return id in self._destinations

    def __len__(self) -> int:
        with self._lock:
            return len(self._destinations)

    def __iter__(self) -> Iterator[Destination]:
        return iter(self.destinations())

    def __repr__(self) -> str:
        return f"Router(destinations={sorted(d.id for d in self.destinations())})"

    @property
    def default_formatter(self) -> Formatter:
        return self._default_formatter

    def set_default_formatter(self, formatter: Formatter) -> None:
        """Formatter for future registrations; existing destinations keep theirs."""
        with self._lock:
            self._default_formatter = formatter

    def on_error(self, handler: ErrorHandler | None) -> None:
        """Install the error hook `(destination_id, sink, error)`, replacing any previous one.

        The hook runs synchronously in the logging thread after the failing
        destination's write lock is released, so it may log through this
        router. Failures raised while a hook is running are dropped rather than
        reported again. `None` removes the hook; failures are then dropped.
        """
        with self._lock:
            self._on_error = handler

    # ─────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────

    def log(self, message: Mapping[str, Any] | None) -> None:
        """Deliver message to every enabled, matching destination. Never raises."""
        view = _EMPTY if message is None else MappingProxyType(message)  # type: ignore[arg-type]
        with self._lock:
            targets = [(d, self._write_locks[d.id]) for d in self._destinations.values() if d.enabled]
            handler = self._on_error

        for dest, write_lock in targets:
            with write_lock:
                result = _deliver(dest, view)
            if handler is not None and result.is_err() and not getattr(_reporting, "active", False):
                _report(handler, dest, result.unwrap_err())


# ═════════════════════════════════════════════════════════════════════════════
# Delivery steps
# ═════════════════════════════════════════════════════════════════════════════


def _deliver(dest: Destination, message: Mapping[str, Any]) -> Result[bool, RoutingError]:
    """Ok(True) if written, Ok(False) if filtered out, Err on failure."""
    return _select(dest, message).flat_map(
        lambda hit: _render(dest, message).flat_map(lambda record: _emit(dest, record)) if hit else Ok(False)
    )


def _select(dest: Destination, message: Mapping[str, Any]) -> Result[bool, RoutingError]:
    flt = dest.filter
    if flt is None:
        return Ok(True)
    return try_fn(lambda: matches(flt, message), lambda exc: _classify(FilterEvaluationError, exc, dest.id))


def _render(dest: Destination, message: Mapping[str, Any]) -> Result[bytes, RoutingError]:
    def run() -> bytes:
        record = dest.formatter.format(message)
        if not isinstance(record, (bytes, bytearray, memoryview)):
            raise FormatError.create(f"formatter returned {type(record).__name__}, expected bytes")
        return bytes(record)

    return try_fn(run, lambda exc: _classify(FormatError, exc, dest.id))


def _emit(dest: Destination, record: bytes) -> Result[bool, RoutingError]:
    sink = dest.sink

    def run() -> bool:
        sink.write(record)  # type: ignore[union-attr]
        sink.write(SEPARATOR)  # type: ignore[union-attr]
        if (flush := getattr(sink, "flush", None)) is not None:
            flush()
        return True

    return try_fn(run, lambda exc: _classify(WriteError, exc, dest.id))


def _classify(kind: type[RoutingError], exc: Exception, destination_id: str) -> RoutingError:
    """Bind a routing error to its destination; wrap anything else as `kind`."""
    if isinstance(exc, RoutingError):
        return exc.for_destination(destination_id)
    return kind.from_exc(exc, destination_id)


def _report(handler: ErrorHandler, dest: Destination, error: RoutingError) -> None:
    _reporting.active = True
    try:
        handler(dest.id, dest.sink, error)
    except Exception:
        logger.exception("error hook raised while reporting failure of destination %r", dest.id)
    finally:
        _reporting.active = False
