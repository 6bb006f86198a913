"""
Configuration for graphql_fetch.

Settings are pydantic models loaded from an optional JSON config file and
``GRAPHQL_FETCH_*`` environment variables, environment winning.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import FetcherOptions, FetchOptions


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )
    mask_sensitive: bool = Field(
        default=True, description="Mask cookies and credentials in log messages"
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


class ClientConfig(BaseModel):
    """Client-level settings for a GraphQL endpoint."""

    model_config = ConfigDict(extra="forbid")

    endpoint: Optional[str] = Field(default=None, description="GraphQL endpoint URL")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Total request timeout in seconds"
    )
    credentials: Optional[str] = Field(
        default=None, description="Credentials mode passed through to fetchers"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_fetcher_options(self) -> FetcherOptions:
        """Client-level FetcherOptions for these settings."""
        fetch_options: Dict[str, Any] = {"headers": dict(self.headers)}
        if self.timeout is not None:
            fetch_options["timeout"] = self.timeout
        if self.credentials is not None:
            fetch_options["credentials"] = self.credentials
        return FetcherOptions(fetch_options=FetchOptions(**fetch_options))


class ConfigLoader:
    """Configuration loader for JSON files and environment variables."""

    def __init__(self, env_prefix: str = "GRAPHQL_FETCH_") -> None:
        self.config_paths = [
            Path("graphql_fetch.json"),
            Path("config/graphql_fetch.json"),
            Path.home() / ".graphql_fetch" / "config.json",
        ]
        self.env_prefix = env_prefix

    def load_config(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> ClientConfig:
        """
        Load configuration from all available sources.

        Args:
            config_file: Specific config file to load instead of searching

        Returns:
            ClientConfig with file values overridden by environment values
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        return ClientConfig(**config_data)

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
            return self._parse_config_file(config_path)

        for config_path in self.config_paths:
            if config_path.exists():
                return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        if config_path.suffix.lower() != ".json":
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                return json.load(f) or {}
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse config file {config_path}: {e}") from e

    def _load_from_environment(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {}

        env_mappings = {
            f"{self.env_prefix}ENDPOINT": ("endpoint",),
            f"{self.env_prefix}TIMEOUT": ("timeout",),
            f"{self.env_prefix}CREDENTIALS": ("credentials",),
            f"{self.env_prefix}HEADERS": ("headers",),
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FORMAT": ("logging", "format"),
            f"{self.env_prefix}LOG_STRUCTURED": ("logging", "enable_structured"),
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is None:
                continue

            if config_path == ("headers",):
                converted: Any = json.loads(value)
            elif config_path in (("endpoint",), ("logging", "format")):
                converted = value
            else:
                converted = self._convert_env_value(value)

            current = config
            for key in config_path[:-1]:
                current = current.setdefault(key, {})
            current[config_path[-1]] = converted

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False

        try:
            return float(value) if "." in value else int(value)
        except ValueError:
            return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(config_file: Optional[Union[str, Path]] = None) -> ClientConfig:
    """Load a ClientConfig using the default loader."""
    return ConfigLoader().load_config(config_file)
