"""Process-wide convenience router for application wiring.

The core `Router` never consults this module. Only loggers created without an
explicit router, and the helpers below, use the process default.

Example:
    >>> import sys
    >>> from logroute import defaults, TextSink, not_, eq
    >>> _ = defaults.register("stdout", TextSink(sys.stdout), filter=not_(eq("level", "debug")))
    >>> defaults.on_error(lambda dest, sink, err: print(dest, err, file=sys.stderr))
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .filters import Filter
from .formatters import Formatter
from .router import Destination, ErrorHandler, Router
from .sinks import Sink

if TYPE_CHECKING:
    from .logger import Logger

_router = Router()
_swap_lock = threading.Lock()


def default_router() -> Router:
    return _router


def set_default_router(router: Router) -> Router:
    """Replace the process default. Returns the previous router."""
    global _router
    with _swap_lock:
        previous, _router = _router, router
    return previous


def register(id: str, sink: Sink | None, formatter: Formatter | None = None, filter: Filter | None = None) -> Destination:  # noqa: A002
    """Register a destination on the default router."""
    return _router.register(id, sink, formatter, filter)


def unregister(id: str) -> bool:  # noqa: A002
    return _router.unregister(id)


def on_error(handler: ErrorHandler | None) -> None:
    """Install the error hook on the default router."""
    _router.on_error(handler)


def log(message: Mapping[str, Any] | None) -> None:
    _router.log(message)


def get_logger(name: str = "", **config: Any) -> Logger:
    """Logger that writes to whichever router is the process default at call time."""
    from .logger import get_logger as _get_logger  # logger imports this module

    return _get_logger(name, **config)
