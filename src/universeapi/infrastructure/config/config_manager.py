"""Configuration manager for loading and validating .universeapi.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from universeapi.domain.config import (
    KNOWN_SERVERS,
    AppConfig,
    ClientConfig,
    RetryConfig,
    ServerDefinition,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".universeapi.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .universeapi.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .universeapi.yml file (searched from current directory upwards)
    3. Environment variables (UNIVERSEAPI_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "client": {
            "timeout": 30,
            "user_agent": "UniverseAPI/1.0.0",
        },
        "retry": {
            "max_attempts": 3,
            "backoff_base": 2,
        },
        "servers": {},
    }

    ENV_OVERRIDES = {
        "UNIVERSEAPI_TIMEOUT": ("client", "timeout"),
        "UNIVERSEAPI_USER_AGENT": ("client", "user_agent"),
        "UNIVERSEAPI_MAX_ATTEMPTS": ("retry", "max_attempts"),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .universeapi.yml (searches from current dir if None)

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
                errors.append(f"  - {field}: {error['msg']}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
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

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file cannot be parsed
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)
        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        for env_name, (section, key) in self.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if not value:
                continue
            section_config = config.setdefault(section, {})
            if not isinstance(section_config, dict):
                raise ConfigurationError(f"Cannot apply {env_name}: '{section}' must be a mapping")
            section_config[key] = value
            logger.debug(f"Applied {env_name} override to {section}.{key}")
        return config

    def get_client_config(self) -> ClientConfig:
        """Get HTTP client configuration

        Returns:
            Client configuration model
        """
        return self.config.client

    def get_retry_config(self) -> RetryConfig:
        """Get retry configuration

        Returns:
            Retry configuration model
        """
        return self.config.retry

    def get_server_definitions(self) -> Dict[str, ServerDefinition]:
        """Built-in server definitions overlaid with the ones from the config file

        Returns:
            Server definitions keyed by name
        """
        definitions = dict(KNOWN_SERVERS)
        definitions.update(self.config.servers)
        return definitions

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "client.timeout" or "retry")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config.model_dump()
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
