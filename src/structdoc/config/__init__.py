"""
structdoc - Configuration Management

This module provides configuration management including:
- YAML configuration loading and validation
- Environment variable handling (.env files, STRUCTDOC_* overrides)
- Configuration defaults
"""

from structdoc.config.environment import ensure_dotenv_loaded, reset_environment
from structdoc.config.loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATHS,
    ENV_VAR_OVERRIDES,
    ConfigLoader,
    ConfigurationError,
    create_default_config,
    load_config,
)
from structdoc.config.models import (
    LoggingConfig,
    LogLevel,
    OutputConfig,
    SourceConfig,
    StructdocConfig,
)

__all__ = [
    # Environment
    "ensure_dotenv_loaded",
    "reset_environment",
    # Loader
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATHS",
    "ENV_VAR_OVERRIDES",
    "ConfigLoader",
    "ConfigurationError",
    "create_default_config",
    "load_config",
    # Models
    "LoggingConfig",
    "LogLevel",
    "OutputConfig",
    "SourceConfig",
    "StructdocConfig",
]
