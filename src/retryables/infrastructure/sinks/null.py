"""Discarding diagnostic sink"""

from retryables.infrastructure.sinks.base import DiagnosticSink


class NullSink(DiagnosticSink):
    """Sink that drops every line"""

    def write(self, line: str) -> None:
        pass


# Shared default, constructed once
DISCARD = NullSink()
