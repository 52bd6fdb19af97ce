"""Factory for creating diagnostic sinks"""

import logging
from typing import Any, Dict

from retryables.infrastructure.sinks.base import DiagnosticSink
from retryables.infrastructure.sinks.logger import LoggerSink
from retryables.infrastructure.sinks.null import DISCARD
from retryables.infrastructure.sinks.stream import StreamSink

logger = logging.getLogger(__name__)


class SinkFactory:
    """Factory for creating diagnostic sink instances"""

    SINKS = ("null", "stderr", "stdout", "logging")

    @classmethod
    def create(cls, sink_type: str, config: Dict[str, Any] = None) -> DiagnosticSink:
        """Create diagnostic sink instance

        Args:
            sink_type: Type of sink (null, stderr, stdout, logging)
            config: Sink configuration (level, logger_name for logging)

        Returns:
            DiagnosticSink instance

        Raises:
            ValueError: If sink type is not supported
        """
        if config is None:
            config = {}

        sink_type_lower = sink_type.lower()

        if sink_type_lower not in cls.SINKS:
            available = ", ".join(cls.SINKS)
            raise ValueError(
                f"Unknown diagnostic sink: {sink_type}. "
                f"Available sinks: {available}"
            )

        logger.info(f"Creating {sink_type_lower} diagnostic sink")
        if sink_type_lower == "null":
            return DISCARD
        if sink_type_lower == "stdout":
            return StreamSink(target="stdout")
        if sink_type_lower == "stderr":
            return StreamSink()
        return LoggerSink(
            logging.getLogger(config.get("logger_name", "retryables")),
            level=config.get("level", logging.WARNING),
        )
