"""Configuration management module."""

from mdpack.core.config.settings import (
    ConfigManager,
    FilterConfig,
    LoggingConfig,
    MdPackConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "FilterConfig",
    "LoggingConfig",
    "MdPackConfig",
    "get_default_config",
    "load_config_from_env",
]
