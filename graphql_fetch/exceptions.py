"""
Exception hierarchy for graphql_fetch.

Transport failures are exceptional and surface as the exceptions defined here.
GraphQL execution errors are not: they are returned as data in the ``errors``
field of a :class:`~graphql_fetch.models.GraphQLResult`.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import aiohttp


class GraphQLFetchError(Exception):
    """
    Base exception for all graphql_fetch errors.

    Attributes:
        message: Human-readable error message
        url: Endpoint involved in the error (if applicable)
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class NoSuchOperationError(GraphQLFetchError):
    """
    Raised when a bound document contains no operation definition.

    Client construction never fails for such documents; the error is raised
    when the corresponding callable is invoked.
    """

    def __init__(self, message: str, name: Optional[str] = None) -> None:
        super().__init__(message)
        self.name = name


class NetworkError(GraphQLFetchError):
    """Raised for network-level failures that are not connection or timeout errors."""

    pass


class TimeoutError(GraphQLFetchError):
    """
    Raised when a request times out.

    Attributes:
        timeout_value: The timeout value that was exceeded (in seconds)
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> None:
        super().__init__(message, url)
        self.timeout_value = timeout_value


class ConnectionError(GraphQLFetchError):
    """Raised when the endpoint cannot be reached (refused, unreachable, SSL)."""

    pass


class ContentError(GraphQLFetchError):
    """Raised when the response body is not a JSON object."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        content_type: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, url)
        self.content_type = content_type
        self.status_code = status_code


class ErrorHandler:
    """Converts low-level exceptions into :class:`GraphQLFetchError` subclasses."""

    @staticmethod
    def handle_aiohttp_error(
        error: BaseException, url: Optional[str] = None
    ) -> GraphQLFetchError:
        """
        Convert an aiohttp (or asyncio) exception to a GraphQLFetchError.

        Args:
            error: The original exception
            url: The endpoint that caused the error

        Returns:
            Appropriate GraphQLFetchError subclass
        """
        if isinstance(error, GraphQLFetchError):
            return error

        if isinstance(error, (asyncio.TimeoutError, aiohttp.ServerTimeoutError)):
            return TimeoutError(f"Request timed out: {error}", url=url)

        if isinstance(error, aiohttp.ClientPayloadError):
            return ContentError(f"Payload error: {error}", url=url)

        if isinstance(error, aiohttp.ContentTypeError):
            return ContentError(
                f"Response is not JSON: {error.message}",
                url=url,
                status_code=error.status,
            )

        if isinstance(error, aiohttp.ClientConnectionError):
            return ConnectionError(f"Connection error: {error}", url=url)

        if isinstance(error, json.JSONDecodeError):
            return ContentError(f"Malformed JSON response: {error}", url=url)

        return NetworkError(f"Unexpected network error: {error}", url=url)
