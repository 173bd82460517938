"""Configuration manager for loading and validating .expbackoff.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from expbackoff.domain.config import BackoffConfig, format_validation_error
from expbackoff.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".expbackoff.yml"


class ConfigManager:
    """Manages configuration from .expbackoff.yml and environment variables

    Configuration priority:
    1. Default values (defined in BackoffConfig)
    2. .expbackoff.yml file (searched from current directory upwards)
    3. Environment variables (EXPBACKOFF_*)
    4. CLI arguments (handled by CLI layer)

    The file may hold the options at top level or under a ``backoff`` key.
    """

    ENV_OVERRIDES = {
        "EXPBACKOFF_MAX_ATTEMPTS": "max_attempts",
        "EXPBACKOFF_DELAY_INTERVAL": "delay_interval",
        "EXPBACKOFF_BASE": "base",
        "EXPBACKOFF_MAX_EXPONENT": "max_exponent",
        "EXPBACKOFF_THROW_ON_EXHAUSTION": "throw_on_exhaustion",
        "EXPBACKOFF_SEED": "seed",
        "EXPBACKOFF_NON_BLOCKING_TIMER": "non_blocking_timer",
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .expbackoff.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: BackoffConfig = self._load_config()
        except ValidationError as e:
            raise ConfigurationError(format_validation_error(e)) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .expbackoff.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILENAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILENAME} found, using defaults")
        return None

    def _load_config(self) -> BackoffConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ConfigurationError: If the file cannot be read or parsed
            ValidationError: If configuration is invalid
        """
        config_dict: Dict[str, Any] = {}

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
            section = file_config.get("backoff", file_config)
            if not isinstance(section, dict):
                raise ConfigurationError("'backoff' section must be a mapping")
            config_dict = copy.deepcopy(section)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)
        return BackoffConfig.model_validate(config_dict)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with env overrides applied
        """
        for env_name, field in self.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                # Drop a camelCase spelling from the file so the env value wins
                alias = BackoffConfig.model_fields[field].alias
                if alias:
                    config.pop(alias, None)
                config[field] = value
        return config

    def get_backoff_config(self) -> BackoffConfig:
        """Get backoff configuration"""
        return self.config

    def with_overrides(self, **overrides: Any) -> BackoffConfig:
        """Return the loaded config with CLI overrides applied (None values skipped)

        Raises:
            ConfigurationError: If an override is invalid
        """
        values = self.config.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return BackoffConfig.from_options(values)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key

        Args:
            key: Configuration key (e.g., "max_attempts")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self.config.model_dump().get(key, default)
