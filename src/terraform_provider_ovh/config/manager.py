"""Application settings management."""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from terraform_provider_ovh.config.schemas.app_schema import AppConfig
from terraform_provider_ovh.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "OVH_PROVIDER_CONFIG"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "OVH_PROVIDER_LOG_LEVEL": ("logging", "level"),
    "OVH_PROVIDER_LOG_DESTINATION": ("logging", "destination"),
    "OVH_PROVIDER_LOG_FILE": ("logging", "file_path"),
    "OVH_PROVIDER_CLIENT_TIMEOUT": ("client", "timeout"),
    "OVH_PROVIDER_VALIDATE_ON_CONFIGURE": ("client", "validate_on_configure"),
    "OVH_PROVIDER_WAIT_TIMEOUT": ("wait", "timeout"),
    "OVH_PROVIDER_WAIT_INTERVAL": ("wait", "interval"),
}


class ConfigurationManager:
    """
    Loads the provider application settings.

    Settings come from an optional YAML or JSON file, then environment
    variable overrides are applied, and the result is validated into an
    :class:`AppConfig`. Loading is lazy and happens once per manager.

    These settings only tune the plugin itself (logging, client timeout,
    polling). OVH credentials are resolved by
    :class:`~terraform_provider_ovh.config.merger.ConfigurationMerger`.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to a YAML or JSON settings file. Falls
                back to the ``OVH_PROVIDER_CONFIG`` environment variable.
        """
        self._config_file = config_file or os.environ.get(CONFIG_FILE_ENV_VAR)
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def reload(self) -> None:
        """Drop the cached configuration; the next access reloads it."""
        with self._lock:
            self._app_config = None

    def _load_app_config(self) -> AppConfig:
        config_data: Dict[str, Any] = {}
        if self._config_file:
            config_data = self.load_from_file(self._config_file)
        config_data = self.apply_environment_overrides(config_data)
        try:
            return AppConfig.from_dict(config_data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid provider settings: {e}") from e

    @staticmethod
    def load_from_file(path: str) -> Dict[str, Any]:
        """
        Load settings from a YAML or JSON file.

        Args:
            path: File path; ``.json`` files are parsed as JSON, anything
                else as YAML

        Returns:
            Settings dictionary

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        file_path = Path(path).expanduser()
        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Unable to read settings file {file_path}: {e}") from e

        try:
            if file_path.suffix == ".json":
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Unable to parse settings file {file_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {file_path} must contain a mapping")
        logger.debug(f"Loaded provider settings from {file_path}")
        return data

    @staticmethod
    def apply_environment_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Return a copy of the settings with environment overrides applied.

        Raises:
            ConfigurationError: If an overridden section is not a mapping
        """
        # An empty YAML section loads as None
        result = {section: dict(values or {}) if isinstance(values, dict) or values is None else values
                  for section, values in config_data.items()}
        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            target = result.setdefault(section, {})
            if not isinstance(target, dict):
                raise ConfigurationError(
                    f"Cannot apply {env_var}: settings section '{section}' must be a mapping"
                )
            target[key] = value
            logger.debug(f"Applied environment override {env_var} to {section}.{key}")
        return result
