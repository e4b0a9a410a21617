"""
================================================================================
Configuration Loader
================================================================================

Reads config/config.yaml once per process. Besides the site URL and browser
launch options, the `ui` tree carries one `ui.waits.<scenario>` block of
polling bounds per widget kind (see wait_helpers.WAIT_SCENARIOS). Any key can be overridden from the environment by
upper-casing its dot path, which is how CI points a run at another host or
stretches the waits on a slow runner.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


# Default configuration file path (repository-level config/)
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Process-wide view of config/config.yaml with environment overrides.

    Lookup order for get(): environment variable, YAML value, caller default.
    Environment values are coerced to the type of the default, so
    UI_WAITS_MODAL_OPEN_TIMEOUT=12 reads back as 12.0 when the default is
    a float.
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Return the process-wide instance, creating it on first use."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Load the YAML file on first construction.

        Args:
            config_path: YAML file to read; config/config.yaml when omitted
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key: Dot path such as "ui.waits.tab_activation.timeout"
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Dot-notation section name (e.g., "ui", "ui.waits")

        Returns:
            Section dictionary or empty dict if not found
        """
        value: Any = self._config
        for part in section.split("."):
            if not isinstance(value, dict):
                return {}
            value = value.get(part, {})
        return value if isinstance(value, dict) else {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """Coerce an environment string to the type of the default it replaces."""
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded instance so the next ConfigLoader() re-reads the file."""
        cls._instance = None
        cls._config = {}


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
]
