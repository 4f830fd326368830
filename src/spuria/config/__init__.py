"""Configuration management for spuria.

Loads and validates YAML-based configuration with Pydantic models.
Environment variables and command-line flags override file values.
"""

from spuria.config.settings import (
    AccessConfig,
    DispatchConfig,
    LoggingConfig,
    RoutesConfig,
    ServerConfig,
    Settings,
    load_settings,
)

__all__ = [
    "AccessConfig",
    "DispatchConfig",
    "LoggingConfig",
    "RoutesConfig",
    "ServerConfig",
    "Settings",
    "load_settings",
]
