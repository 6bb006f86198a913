"""
Default transport.

Binds an operation document to an endpoint and returns a coroutine function
that POSTs ``{"query", "variables"}`` with aiohttp, layering client-level and
call-level options and propagating session cookies through a
:class:`~graphql_fetch.cookies.CookieStore`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Union

import aiohttp
from graphql import OperationType

from .cookies import CookieStore
from .documents import Document, document_source, get_operation_definitions
from .exceptions import ContentError, ErrorHandler, GraphQLFetchError
from .models import (
    FetcherOptions,
    GraphQLResult,
    OptionsInput,
    Queryable,
    coerce_options,
    merge_fetcher_options,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def _operation_name(query: Union[str, Document]) -> str:
    if isinstance(query, str):
        return "<text>"
    for operation in get_operation_definitions(query):
        if operation.name is not None:
            return operation.name.value
    return "<anonymous>"


def build_headers(
    options: FetcherOptions, cookie_store: Optional[CookieStore]
) -> Dict[str, str]:
    """Merged custom headers, the JSON content type, and the Cookie header if any."""
    headers = {
        name: value
        for name, value in options.fetch_options.headers.items()
        if name.lower() != "content-type"
    }
    headers["Content-Type"] = JSON_CONTENT_TYPE
    if cookie_store is not None and len(cookie_store):
        headers["Cookie"] = cookie_store.serialize()
    return headers


async def _post(
    session: aiohttp.ClientSession,
    endpoint: str,
    body: str,
    headers: Dict[str, str],
    options: FetcherOptions,
    cookie_store: Optional[CookieStore],
) -> Any:
    fetch_options = options.fetch_options
    request_kwargs = fetch_options.request_kwargs()
    if "timeout" in fetch_options.model_fields_set:
        request_kwargs["timeout"] = aiohttp.ClientTimeout(total=fetch_options.timeout)

    async with session.post(
        endpoint, data=body, headers=headers, **request_kwargs
    ) as response:
        if cookie_store is not None:
            cookie_store.update_from_set_cookie(response.headers.getall("Set-Cookie", []))

        raw = await response.read()
        try:
            return json.loads(raw)
        except ValueError as e:
            raise ContentError(
                f"Malformed JSON response: {e}",
                url=endpoint,
                content_type=response.headers.get("Content-Type"),
                status_code=response.status,
            ) from e


def default_fetcher(
    *,
    endpoint: str,
    query: Union[str, Document],
    operation_type: OperationType = OperationType.QUERY,
    options: OptionsInput = None,
) -> Queryable[Any, Any]:
    """
    Bind a document to an endpoint using aiohttp.

    Binding performs no I/O. Each call of the returned coroutine function
    issues exactly one POST request.

    Args:
        endpoint: GraphQL endpoint URL
        query: Operation document, or its text
        operation_type: Operation type of the bound document
        options: Client-level options

    Returns:
        Coroutine function ``(variables=None, options=None) -> GraphQLResult``
    """
    client_options = coerce_options(options)
    operation_name = _operation_name(query)

    async def queryable(
        variables: Optional[Dict[str, Any]] = None,
        options: OptionsInput = None,
    ) -> GraphQLResult:
        merged = merge_fetcher_options(client_options, coerce_options(options))
        cookie_store = merged.cookie_store
        headers = build_headers(merged, cookie_store)
        body = json.dumps(
            {"query": document_source(query), "variables": variables or {}}
        )

        logger.debug(
            f"POST {operation_type.value} {operation_name} to {endpoint} "
            f"(cookies={'on' if cookie_store is not None else 'off'})"
        )

        try:
            if merged.session is not None:
                payload = await _post(
                    merged.session, endpoint, body, headers, merged, cookie_store
                )
            else:
                async with aiohttp.ClientSession(
                    cookie_jar=aiohttp.DummyCookieJar(),
                    timeout=aiohttp.ClientTimeout(total=None),
                ) as session:
                    payload = await _post(
                        session, endpoint, body, headers, merged, cookie_store
                    )
        except GraphQLFetchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ErrorHandler.handle_aiohttp_error(e, url=endpoint) from e

        result = GraphQLResult.from_payload(payload, url=endpoint)
        if result.has_errors:
            logger.debug(
                f"{operation_name} returned {len(result.errors or [])} GraphQL error(s)"
            )
        return result

    queryable.__name__ = operation_name
    queryable.__qualname__ = f"default_fetcher.<{operation_name}>"
    return queryable
