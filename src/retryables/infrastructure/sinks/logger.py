"""Diagnostic sink forwarding to the logging module"""

import logging
from typing import Optional, Union

from retryables.infrastructure.sinks.base import DiagnosticSink


class LoggerSink(DiagnosticSink):
    """Emits each line as a log record"""

    def __init__(self, logger: Optional[logging.Logger] = None, level: Union[int, str] = logging.WARNING):
        """Initialize logger sink

        Args:
            logger: Target logger (the "retryables" logger if None)
            level: Level name or number for emitted records

        Raises:
            ValueError: If level name is unknown
        """
        if isinstance(level, str):
            resolved = logging.getLevelName(level.upper())
            if not isinstance(resolved, int):
                raise ValueError(f"Unknown log level: {level}")
            level = resolved
        self.logger = logger or logging.getLogger("retryables")
        self.level = level

    def write(self, line: str) -> None:
        self.logger.log(self.level, line)
