"""Sinks: write-only byte streams that receive formatted records.

Any object with `write(bytes)` is a sink (binary files, `io.BytesIO`,
`sys.stdout.buffer`, sockets wrapped with `makefile("wb")`). Text streams are
adapted with `TextSink`.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Protocol, TextIO, runtime_checkable


@runtime_checkable
class Sink(Protocol):
    """Protocol for record destinations. `flush()` is optional and called when present."""

    def write(self, data: bytes, /) -> object: ...


@dataclass(slots=True)
class TextSink:
    """Adapt a text stream (sys.stdout, io.StringIO) to the byte sink protocol.

    Example:
        >>> buf = io.StringIO()
        >>> TextSink(buf).write(b'{"a":1}')
        7
    """

    stream: TextIO = field(default_factory=lambda: sys.stdout)
    encoding: str = "utf-8"

    def write(self, data: bytes, /) -> int:
        return self.stream.write(data.decode(self.encoding))

    def flush(self) -> None:
        self.stream.flush()
