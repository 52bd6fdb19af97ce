"""Configuration manager for loading and validating .retryables.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml
from pydantic import ValidationError

from retryables.domain.config import AppConfig, DiagnosticsConfig, RetryConfig
from retryables.infrastructure.retry import RetryExecutor
from retryables.infrastructure.sinks.base import DiagnosticSink
from retryables.infrastructure.sinks.factory import SinkFactory

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".retryables.yml"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "RETRYABLES_ATTEMPT_BUDGET": ("retry", "attempt_budget"),
    "RETRYABLES_BASE_DELAY": ("retry", "base_delay"),
    "RETRYABLES_MAX_DELAY": ("retry", "max_delay"),
    "RETRYABLES_SINK": ("diagnostics", "sink"),
}


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .retryables.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .retryables.yml file (searched from current directory upwards)
    3. Environment variables (RETRYABLES_*)
    """

    DEFAULT_CONFIG = {
        "retry": {
            "attempt_budget": 3,
            "base_delay": 1.0,
            "max_delay": 8.0,
        },
        "diagnostics": {
            "sink": "null",
            "level": "WARNING",
            "logger_name": "retryables",
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .retryables.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {field}: {msg}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .retryables.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Returns:
            Validated AppConfig instance

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file is not a mapping
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")
            else:
                if not isinstance(file_config, dict):
                    raise ConfigurationError(f"{self.config_path} must contain a mapping at the top level")
                config_dict = self._merge_config(config_dict, file_config)
                logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Values stay strings here; pydantic coerces them during validation.

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with env overrides applied
        """
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config.setdefault(section, {})[key] = value
        return config

    def get_retry_config(self) -> RetryConfig:
        """Get retry configuration

        Returns:
            Retry configuration model
        """
        return self.config.retry

    def get_diagnostics_config(self) -> DiagnosticsConfig:
        """Get diagnostics configuration

        Returns:
            Diagnostics configuration model
        """
        return self.config.diagnostics

    def create_sink(self) -> DiagnosticSink:
        """Build the diagnostic sink described by the diagnostics section"""
        diagnostics = self.config.diagnostics
        return SinkFactory.create(diagnostics.sink, diagnostics.model_dump())

    def create_executor(self, retry_if: Optional[Callable[[Exception], bool]] = None) -> RetryExecutor:
        """Build a RetryExecutor from the loaded configuration

        Args:
            retry_if: Optional retry predicate (retry any exception if None)

        Returns:
            Configured RetryExecutor
        """
        retry_config = self.config.retry
        logger.info(
            f"Creating retry executor: {retry_config.attempt_budget} attempts, "
            f"delay {retry_config.base_delay}s..{retry_config.max_delay}s"
        )
        return RetryExecutor(retry_config, retry_if=retry_if, sink=self.create_sink())

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "retry.attempt_budget" or "retry")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
