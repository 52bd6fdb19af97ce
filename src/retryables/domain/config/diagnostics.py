"""Diagnostics configuration model."""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class DiagnosticsConfig(BaseModel):
    """Configuration for the diagnostic sink receiving failed-attempt lines.

    Attributes:
        sink: Sink kind (null discards everything)
        level: Log level used by the logging sink
        logger_name: Logger used by the logging sink
    """

    sink: Literal["null", "stderr", "stdout", "logging"] = "null"
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    logger_name: str = "retryables"

    model_config = ConfigDict(frozen=True, extra="forbid")
