"""Configuration management for spuria.

Loads settings from a YAML configuration file with environment variable
overrides (``SPURIA_`` prefix). Supports .env files. Command-line flags
are applied on top by :mod:`spuria.cli`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsError

from spuria.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/spuria.yaml")
DEFAULT_REPLACE_REGEX = r"^[ a-zA-Z0-9/-]*$"


class ServerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = Field(default="127.0.0.1", description="IP to listen on")
    port: int = Field(default=4870, ge=1, le=65535)


class AccessConfig(BaseModel):
    """Source-address allow-list. An empty list disables whitelisting."""

    model_config = ConfigDict(frozen=True)

    allowed_ips: frozenset[str] = Field(default=frozenset({"127.0.0.1"}))

    @field_validator("allowed_ips", mode="before")
    @classmethod
    def _split_ip_list(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = value.split(",")
        return frozenset(ip.strip() for ip in value if ip and ip.strip())

    @property
    def whitelist_enabled(self) -> bool:
        return bool(self.allowed_ips)


class RoutesConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str | None = Field(default=None, description="CSV file of path,command rows")
    static_command: str | None = Field(
        default=None, description="Single command bound to static_path; disables the CSV file"
    )
    static_path: str = Field(default="/do")


class DispatchConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    return_result: bool = Field(
        default=False, description="Echo captured stdout/stderr instead of OK/ERR"
    )
    rate_limit: int = Field(default=10, ge=0, description="Requests per path per minute, 0 = unlimited")
    replace_params: bool = Field(default=False, description="Substitute $-prefixed GET parameters")
    replace_regex: re.Pattern[str] = Field(default=re.compile(DEFAULT_REPLACE_REGEX))
    continue_on_error: bool = Field(
        default=False, description="Skip bad parameters instead of failing the request"
    )
    shell: str = Field(default="bash")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str = Field(default="stdout", description="'stdout' or a file path opened for append")


class Settings(BaseSettings):
    """Root configuration for the spuria gateway.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "SPURIA_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    access: AccessConfig = Field(default_factory=AccessConfig)
    routes: RoutesConfig = Field(default_factory=RoutesConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(
    config_path: Path | str | None = None,
    overrides: dict[str, dict[str, Any]] | None = None,
) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: overrides (CLI flags) > YAML file > env vars > .env file > defaults

    Nested env vars use ``__`` as delimiter, e.g.
    ``SPURIA_DISPATCH__RATE_LIMIT=0``. List values such as
    ``SPURIA_ACCESS__ALLOWED_IPS`` must be JSON encoded.

    Raises:
        ConfigurationError: If the YAML is unreadable or any value fails
            validation (including an invalid ``replace_regex``).
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not read config file {path}: {e}") from e
        if not isinstance(yaml_data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        logger.info("Loaded configuration from %s", path)
    elif config_path:
        raise ConfigurationError(f"Config file {path} not found")
    else:
        logger.debug("Config file %s not found, using defaults + env vars", path)

    for section, values in (overrides or {}).items():
        current = yaml_data.get(section) or {}
        yaml_data[section] = {**current, **values}

    try:
        return Settings(**yaml_data)
    except (ValidationError, SettingsError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
