"""Configuration models with Pydantic validation."""

from retryables.domain.config.app import AppConfig
from retryables.domain.config.diagnostics import DiagnosticsConfig
from retryables.domain.config.retry import RetryConfig

__all__ = [
    "AppConfig",
    "DiagnosticsConfig",
    "RetryConfig",
]
