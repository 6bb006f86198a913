"""
Logging helpers for graphql_fetch.

The library only creates module loggers; nothing is configured on import.
Applications can call :func:`setup_logging` for a ready-made console setup
with optional JSON output and masking of cookies and credentials.
"""

from .filters import SensitiveDataFilter
from .formatters import StructuredFormatter
from .manager import LoggingManager, cleanup_logging, setup_logging

__all__ = [
    "LoggingManager",
    "setup_logging",
    "cleanup_logging",
    "StructuredFormatter",
    "SensitiveDataFilter",
]
