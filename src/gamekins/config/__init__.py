"""
Gamekins - Configuration Management

YAML configuration with environment variable substitution, GAMEKINS_*
overrides and .env loading, validated with Pydantic.
"""

from gamekins.config.environment import ensure_dotenv_loaded, reset_environment
from gamekins.config.loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATHS,
    ENV_VAR_OVERRIDES,
    ConfigLoader,
    ConfigurationError,
    get_config,
    load_config,
    reset_config,
)
from gamekins.config.logs import configure_logging
from gamekins.config.models import (
    ChallengeWeightsConfig,
    GamekinsConfig,
    GenerationConfig,
    LoggingConfig,
    LogLevel,
    ReportsConfig,
)

__all__ = [
    # Config models
    "GenerationConfig",
    "ChallengeWeightsConfig",
    "ReportsConfig",
    "LogLevel",
    "LoggingConfig",
    "GamekinsConfig",
    # Loader
    "ConfigLoader",
    "ConfigurationError",
    "load_config",
    "get_config",
    "reset_config",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATHS",
    "ENV_VAR_OVERRIDES",
    # Environment
    "ensure_dotenv_loaded",
    "reset_environment",
    # Logging
    "configure_logging",
]
