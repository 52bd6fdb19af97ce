"""Diagnostic sinks"""

from retryables.infrastructure.sinks.base import DiagnosticSink
from retryables.infrastructure.sinks.factory import SinkFactory
from retryables.infrastructure.sinks.logger import LoggerSink
from retryables.infrastructure.sinks.null import DISCARD, NullSink
from retryables.infrastructure.sinks.stream import StreamSink

__all__ = ["DISCARD", "DiagnosticSink", "LoggerSink", "NullSink", "SinkFactory", "StreamSink"]
