"""Diagnostic sink writing to a text stream"""

import sys
from typing import Optional, TextIO

from retryables.infrastructure.sinks.base import DiagnosticSink


class StreamSink(DiagnosticSink):
    """Appends each line, newline-terminated, to a text stream"""

    TARGETS = ("stderr", "stdout")

    def __init__(self, stream: Optional[TextIO] = None, *, target: str = "stderr"):
        """Initialize stream sink

        Args:
            stream: Any object with a write(str) method (sys.<target> if None)
            target: Name of the sys stream used when no stream is given

        Raises:
            ValueError: If stream is not writable or target is unknown
        """
        if stream is not None and not callable(getattr(stream, "write", None)):
            raise ValueError("stream must provide a write() method")
        if target not in self.TARGETS:
            raise ValueError(f"Unknown stream target: {target}")
        self._stream = stream
        self._target = target

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys and similar swaps are honored
        if self._stream is not None:
            return self._stream
        return getattr(sys, self._target)

    def write(self, line: str) -> None:
        self.stream.write(f"{line}\n")
