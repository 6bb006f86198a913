"""
Shared data models for graphql_fetch.

Options are pydantic models so they can be given either as model instances or
as plain dictionaries. Results are plain dataclasses built from the response
body without schema validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    TypeVar,
    Union,
)

import aiohttp
from graphql import OperationType
from pydantic import BaseModel, ConfigDict, Field

from .cookies import CookieStore
from .documents import Document
from .exceptions import ContentError

__all__ = [
    "FetchOptions",
    "FetcherOptions",
    "Fetcher",
    "GraphQLResult",
    "OperationType",
    "OptionsInput",
    "Queryable",
    "coerce_options",
    "merge_fetch_options",
    "merge_fetcher_options",
]

TResult = TypeVar("TResult", covariant=True)
TVariables = TypeVar("TVariables", contravariant=True)

# Request arguments always supplied by the transport
TRANSPORT_OWNED_KWARGS = frozenset({"method", "url", "data", "json", "headers"})


class FetchOptions(BaseModel):
    """
    Transport-level request options.

    Unknown fields are kept and forwarded as keyword arguments to
    ``aiohttp.ClientSession.request`` (for example ``ssl`` or ``proxy``).
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    credentials: Optional[str] = Field(
        default=None,
        description="Browser credentials mode; accepted but not used by aiohttp",
    )
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Total request timeout in seconds (None = no timeout)"
    )

    def request_kwargs(self) -> Dict[str, Any]:
        """
        Extra fields to forward to ``ClientSession.request``.

        Keys the transport sets itself are left out, so the request is always
        a JSON POST to the bound endpoint.
        """
        return {
            key: value
            for key, value in (self.model_extra or {}).items()
            if key not in TRANSPORT_OWNED_KWARGS
        }


class FetcherOptions(BaseModel):
    """
    Client-level or call-level configuration.

    Attributes:
        fetch_options: Transport-level request options
        context: Opaque caller data for custom fetchers
        cookie_store: Session store used to send and capture cookies
        session: Caller-owned aiohttp session to reuse instead of a per-call one
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        extra="forbid",
    )

    fetch_options: FetchOptions = Field(default_factory=FetchOptions, alias="fetchOptions")
    context: Any = None
    cookie_store: Optional[CookieStore] = Field(default=None, alias="cookieStore")
    session: Optional[aiohttp.ClientSession] = None


OptionsInput = Union[FetcherOptions, Mapping[str, Any], None]


def coerce_options(options: OptionsInput) -> Optional[FetcherOptions]:
    """Accept options as a model, a mapping or None."""
    if options is None or isinstance(options, FetcherOptions):
        return options
    return FetcherOptions.model_validate(dict(options))


def merge_fetch_options(base: FetchOptions, override: FetchOptions) -> FetchOptions:
    """
    Shallow-merge two FetchOptions, ``override`` winning on conflicts.

    Only explicitly set fields of ``override`` take part, so unset fields
    inherit from ``base``. Headers are merged key by key the same way.
    """
    merged = {**_explicit_values(base), **_explicit_values(override)}
    merged["headers"] = {**base.headers, **override.headers}
    return FetchOptions(**merged)


def _explicit_values(options: FetchOptions) -> Dict[str, Any]:
    values = {
        name: getattr(options, name)
        for name in options.model_fields_set
        if name in FetchOptions.model_fields
    }
    values.update(options.model_extra or {})
    return values


def merge_fetcher_options(
    client_options: Optional[FetcherOptions],
    call_options: Optional[FetcherOptions],
) -> FetcherOptions:
    """Layer call-level options over client-level options."""
    client_options = client_options or FetcherOptions()
    if call_options is None:
        return client_options

    return FetcherOptions(
        fetch_options=merge_fetch_options(
            client_options.fetch_options, call_options.fetch_options
        ),
        context=(
            call_options.context
            if call_options.context is not None
            else client_options.context
        ),
        cookie_store=(
            call_options.cookie_store
            if call_options.cookie_store is not None
            else client_options.cookie_store
        ),
        session=(
            call_options.session
            if call_options.session is not None
            else client_options.session
        ),
    )


@dataclass
class GraphQLResult:
    """
    Result of one GraphQL operation.

    ``errors`` is None on success. ``data`` may legitimately be None or hold
    null fields on a successful result.
    """

    data: Optional[Any] = None
    errors: Optional[List[Dict[str, Any]]] = None
    extensions: Optional[Dict[str, Any]] = None

    @classmethod
    def from_payload(cls, payload: Any, url: Optional[str] = None) -> "GraphQLResult":
        """
        Build a result from a decoded response body.

        Raises:
            ContentError: If the body is not a JSON object
        """
        if not isinstance(payload, dict):
            raise ContentError(
                f"Expected a JSON object, got {type(payload).__name__}", url=url
            )
        return cls(
            data=payload.get("data"),
            errors=payload.get("errors"),
            extensions=payload.get("extensions"),
        )

    @classmethod
    def from_execution_result(cls, result: Any) -> "GraphQLResult":
        """Build a result from a graphql-core ``ExecutionResult``."""
        return cls.from_payload(result.formatted)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error_messages(self) -> List[str]:
        return [error.get("message", "Unknown error") for error in self.errors or []]

    def get_data(self, path: Optional[str] = None) -> Any:
        """
        Get data from result with optional path.

        Args:
            path: Dot-separated path to data (e.g., "findBookByTitle.title")

        Returns:
            Data at the specified path or full data if no path
        """
        if not path or self.data is None:
            return self.data

        current = self.data
        for key in path.split("."):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return None

        return current


class Queryable(Protocol[TResult, TVariables]):
    """A callable bound to one operation and one fetcher."""

    def __call__(
        self,
        variables: Optional[TVariables] = None,
        options: OptionsInput = None,
    ) -> Awaitable[GraphQLResult]: ...


class Fetcher(Protocol):
    """Binds one operation document to an endpoint, returning its Queryable."""

    def __call__(
        self,
        *,
        endpoint: str,
        query: Union[str, Document],
        operation_type: OperationType,
        options: Optional[FetcherOptions] = None,
    ) -> Queryable[Any, Any]: ...
