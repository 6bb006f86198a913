"""
Logging manager for graphql_fetch.
"""

import logging
import sys
from typing import Dict, Optional

from ..config import LoggingConfig
from .filters import SensitiveDataFilter
from .formatters import StructuredFormatter

PACKAGE_LOGGER = "graphql_fetch"


class LoggingManager:
    """Installs and removes the package's console handler."""

    def __init__(self, logger_name: str = PACKAGE_LOGGER) -> None:
        self.logger_name = logger_name
        self._handlers: Dict[str, logging.Handler] = {}
        self._configured = False

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(self.logger_name)

    def setup_logging(self, config: Optional[LoggingConfig] = None) -> None:
        """
        Configure the package logger.

        Args:
            config: Logging configuration (defaults to INFO, plain text)
        """
        config = config or LoggingConfig()
        if self._configured:
            self.cleanup()

        level = getattr(logging, config.level.value)
        self.logger.setLevel(level)

        handler = logging.StreamHandler(sys.stderr)
        formatter: logging.Formatter
        if config.enable_structured:
            formatter = StructuredFormatter()
        else:
            formatter = logging.Formatter(config.format)
        handler.setFormatter(formatter)
        handler.setLevel(level)
        if config.mask_sensitive:
            handler.addFilter(SensitiveDataFilter())

        self.logger.addHandler(handler)
        self._handlers["console"] = handler
        self._configured = True

        self.logger.debug("Logging configured")

    def cleanup(self) -> None:
        """Remove and close every handler installed by this manager."""
        for handler in self._handlers.values():
            self.logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        self._configured = False

    def is_configured(self) -> bool:
        return self._configured


_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configure graphql_fetch logging with the global manager."""
    _logging_manager.setup_logging(config)


def cleanup_logging() -> None:
    _logging_manager.cleanup()
