"""
Configuration Loader.

Loads and validates configuration from YAML files with environment
variable substitution.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gamekins.config.environment import ensure_dotenv_loaded
from gamekins.config.models import GamekinsConfig

logger = logging.getLogger(__name__)

# Default configuration file locations
DEFAULT_CONFIG_PATHS = [
    "gamekins.yaml",
    "gamekins.yml",
    ".gamekins.yaml",
    ".gamekins.yml",
]

# Environment variable for config path
CONFIG_ENV_VAR = "GAMEKINS_CONFIG"

# Maps env var name to config path (dot-separated)
ENV_VAR_OVERRIDES = {
    # Generation settings
    "GAMEKINS_MAX_ATTEMPTS": "generation.max_attempts",
    "GAMEKINS_UNIQUE_ATTEMPTS": "generation.unique_attempts",
    "GAMEKINS_CURRENT_CHALLENGES": "generation.current_challenges",
    "GAMEKINS_STORED_CHALLENGES": "generation.stored_challenges",
    "GAMEKINS_RANK_BIAS": "generation.rank_bias",
    "GAMEKINS_SEED": "generation.seed",
    # Report settings
    "GAMEKINS_JACOCO_RESULTS_PATH": "reports.jacoco_results_path",
    "GAMEKINS_JACOCO_CSV_PATH": "reports.jacoco_csv_path",
    "GAMEKINS_MUTATION_REPORT_PATH": "reports.mutation_report_path",
    "GAMEKINS_SMELLS_REPORT_PATH": "reports.smells_report_path",
    "GAMEKINS_JUNIT_RESULTS_PATH": "reports.junit_results_path",
    # Logging settings
    "GAMEKINS_LOG_LEVEL": "logging.level",
}


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        errors: list[dict] | None = None,
        path: Path | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            errors: List of validation errors (from Pydantic)
            path: Path to the config file that caused the error
        """
        super().__init__(message)
        self.errors = errors or []
        self.path = path

    def __str__(self) -> str:
        """Format error message with details."""
        msg = super().__str__()
        if self.path:
            msg = f"{msg} (file: {self.path})"
        if self.errors:
            details = []
            for err in self.errors[:5]:
                loc = ".".join(str(x) for x in err.get("loc", []))
                details.append(f"  - {loc}: {err.get('msg', 'Unknown error')}")
            if len(self.errors) > 5:
                details.append(f"  ... and {len(self.errors) - 5} more errors")
            msg = f"{msg}\n" + "\n".join(details)
        return msg


class ConfigLoader:
    """Loads configuration from YAML files.

    Supports:
    - YAML configuration files
    - Environment variable substitution (${VAR} and ${VAR:-default} syntax)
    - GAMEKINS_* overrides from the environment or a .env file
    - Validation via Pydantic

    Usage:
        # Load from specific file
        config = ConfigLoader("gamekins.yaml").load()

        # Load from GAMEKINS_CONFIG or default locations
        config = ConfigLoader().load_from_env()
    """

    # Matches ${VAR_NAME}, ${VAR_NAME:-default} and ${VAR_NAME:default}
    ENV_PATTERN = re.compile(r"\$\{(\w+)(?::-?([^}]*))?\}")

    def __init__(
        self,
        config_path: str | Path | None = None,
        env_file: str = ".env",
    ) -> None:
        """Initialize the config loader.

        Args:
            config_path: Path to YAML config file (optional)
            env_file: Path to .env file for environment loading
        """
        self._config_path = Path(config_path) if config_path else None
        self._env_file = env_file
        self._config: GamekinsConfig | None = None
        self._loaded_from_path: Path | None = None

    @property
    def config_path(self) -> Path | None:
        return self._config_path

    @property
    def loaded_from_path(self) -> Path | None:
        """Path the config was actually loaded from, None for defaults."""
        return self._loaded_from_path

    @property
    def config(self) -> GamekinsConfig | None:
        return self._config

    def load(self, path: str | Path | None = None) -> GamekinsConfig:
        """Load and validate configuration.

        Args:
            path: Optional path overriding the one given at construction.
                Without any path the defaults are used.

        Returns:
            Validated GamekinsConfig

        Raises:
            ConfigurationError: If config is invalid
            FileNotFoundError: If config file not found
        """
        if path is not None:
            self._config_path = Path(path)

        ensure_dotenv_loaded(self._env_file)

        if self._config_path:
            raw = self._load_yaml()
            self._loaded_from_path = self._config_path
        else:
            raw = {}
            self._loaded_from_path = None

        processed = self._substitute_env_vars(raw)
        processed = self._apply_env_overrides(processed)
        # YAML parses empty sections as None; drop them so defaults apply
        processed = self._clean_none_values(processed)

        try:
            self._config = GamekinsConfig(**processed)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e.error_count()} errors",
                errors=e.errors(),
                path=self._loaded_from_path,
            ) from e

        logger.debug(f"Loaded configuration from {self._loaded_from_path or 'defaults'}")
        return self._config

    def load_from_env(self) -> GamekinsConfig:
        """Load configuration from GAMEKINS_CONFIG or default locations.

        Search order:
        1. GAMEKINS_CONFIG environment variable (if set)
        2. gamekins.yaml, gamekins.yml, .gamekins.yaml, .gamekins.yml
        3. Built-in defaults

        Returns:
            Validated GamekinsConfig

        Raises:
            ConfigurationError: If config is invalid
            FileNotFoundError: If GAMEKINS_CONFIG points to a missing file
        """
        ensure_dotenv_loaded(self._env_file)

        env_config_path = os.environ.get(CONFIG_ENV_VAR)
        if env_config_path:
            config_path = Path(env_config_path)
            if not config_path.exists():
                raise FileNotFoundError(
                    f"Config file specified by {CONFIG_ENV_VAR} not found: {env_config_path}"
                )
            return self.load(config_path)

        for default_path in DEFAULT_CONFIG_PATHS:
            path = Path(default_path)
            if path.exists():
                return self.load(path)

        self._config_path = None
        return self.load()

    def _load_yaml(self) -> dict[str, Any]:
        """Load the YAML configuration file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If YAML is invalid
        """
        if not self._config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self._config_path}")

        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}", path=self._config_path) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration root must be a mapping", path=self._config_path
            )
        return data

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute environment variables in config."""
        if isinstance(data, dict):
            return {k: self._substitute_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str):
            return self._substitute_string(data)
        else:
            return data

    def _clean_none_values(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: self._clean_none_values(v) for k, v in data.items() if v is not None}
        elif isinstance(data, list):
            return [self._clean_none_values(item) for item in data]
        else:
            return data

    def _substitute_string(self, value: str) -> Any:
        """Substitute environment variables in a string.

        A value that is a single ``${VAR}`` reference is coerced to bool,
        int or float where possible. Embedded references are replaced as
        text. Unresolved references are left as they are.
        """
        full_match = self.ENV_PATTERN.fullmatch(value)
        if full_match:
            env_value = os.environ.get(full_match.group(1))
            resolved = env_value if env_value is not None else full_match.group(2)
            if resolved is not None:
                return self._coerce_type(resolved)
            return value

        def replace(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            if match.group(2) is not None:
                return match.group(2)
            return match.group(0)

        return self.ENV_PATTERN.sub(replace, value)

    def _coerce_type(self, value: str) -> Any:
        """Coerce a string value to bool, int, float or None."""
        if value == "":
            return None

        lower_value = value.lower()
        if lower_value in ("true", "yes", "on"):
            return True
        if lower_value in ("false", "no", "off"):
            return False

        try:
            if "." not in value and "e" not in lower_value:
                return int(value)
            return float(value)
        except ValueError:
            pass

        return value

    def _apply_env_overrides(self, config_dict: dict[str, Any]) -> dict[str, Any]:
        """Apply GAMEKINS_* overrides; they take precedence over the file."""
        for env_var, config_path in ENV_VAR_OVERRIDES.items():
            env_value = os.environ.get(env_var)
            if env_value is not None:
                self._set_nested_value(config_dict, config_path, self._coerce_type(env_value))
        return config_dict

    def _set_nested_value(self, config_dict: dict[str, Any], path: str, value: Any) -> None:
        """Set a nested value in a dictionary using dot notation."""
        parts = path.split(".")
        current = config_dict
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value


# Global configuration cache
_global_config: GamekinsConfig | None = None


def load_config(
    config_path: str | Path | None = None,
    env_file: str = ".env",
) -> GamekinsConfig:
    """Load configuration from a file, or from the environment if no path.

    Args:
        config_path: Path to YAML config file; None searches GAMEKINS_CONFIG
            and the default locations
        env_file: Path to .env file

    Returns:
        Validated GamekinsConfig

    Raises:
        ConfigurationError: If config validation fails
        FileNotFoundError: If config file not found
    """
    global _global_config

    loader = ConfigLoader(config_path, env_file)
    _global_config = loader.load() if config_path else loader.load_from_env()
    return _global_config


def get_config() -> GamekinsConfig:
    """Get the global configuration, loading it on first use."""
    if _global_config is None:
        return load_config()
    return _global_config


def reset_config() -> None:
    """Reset global configuration. Useful for testing."""
    global _global_config
    _global_config = None
