"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from retryables.domain.config.diagnostics import DiagnosticsConfig
from retryables.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Main configuration.

    This is the root configuration model that aggregates all configuration sections.
    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        retry: Attempt budget and delay policy
        diagnostics: Where failed-attempt lines are written
    """

    retry: RetryConfig = Field(default_factory=RetryConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)

    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "retry": {
                    "attempt_budget": 3,
                    "base_delay": 1.0,
                    "max_delay": 8.0,
                },
                "diagnostics": {
                    "sink": "logging",
                    "level": "WARNING",
                    "logger_name": "retryables",
                },
            }
        },
    )
