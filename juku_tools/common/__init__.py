"""
================================================================================
Juku Tools Common Utilities
================================================================================

Shared configuration management and logging setup.

Exports:
    - ConfigLoader: Singleton YAML + environment configuration
    - init_logger: Initialize loguru with the configured sinks
    - get_logger: Configured loguru logger

Usage:
    from juku_tools.common import ConfigLoader, init_logger

    init_logger()
    base_url = ConfigLoader().get("ui.base_url", "http://localhost:3000")

================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError, DEFAULT_CONFIG_PATH
from .global_config import get_logger, init_logger, reset_logger

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "get_logger",
    "init_logger",
    "reset_logger",
]
