"""
Logging filters for graphql_fetch.
"""

import logging
import re
from typing import List, Pattern, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask cookie values and credentials in log messages."""

    def __init__(self) -> None:
        super().__init__()

        self.patterns: List[Tuple[Pattern[str], str]] = [
            # Cookie / Set-Cookie header values
            (
                re.compile(r"((?:set-)?cookie[\"']?\s*[:=]\s*[\"']?)([^\"'\n]+)", re.IGNORECASE),
                r"\1***MASKED***",
            ),
            (re.compile(r"(bearer\s+)([A-Za-z0-9\-._~+/]+=*)", re.IGNORECASE), r"\1***MASKED***"),
            (
                re.compile(r"(authorization[\"']?\s*[:=]\s*[\"']?)([^\"'\s,}]+)", re.IGNORECASE),
                r"\1***MASKED***",
            ),
            (
                re.compile(r"((?:api[_-]?key|token|secret|password)[\"']?\s*[:=]\s*[\"']?)([^\"'\s,}]+)", re.IGNORECASE),
                r"\1***MASKED***",
            ),
            # Credentials embedded in URLs
            (re.compile(r"(https?://[^:/\s]+):([^@\s]+)@", re.IGNORECASE), r"\1:***MASKED***@"),
        ]

    def mask(self, message: str) -> str:
        for pattern, replacement in self.patterns:
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask sensitive data in the record's message."""
        record.msg = self.mask(record.getMessage())
        record.args = ()
        return True
