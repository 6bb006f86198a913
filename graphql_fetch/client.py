"""
Client factory.

Turns a mapping of operation documents (typically a generated module) into
one awaitable callable per operation, named after the mapping key.
"""

from __future__ import annotations

import logging
import types
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from graphql import OperationType

from .config import ClientConfig, load_config
from .documents import DOCUMENT_SUFFIX, get_operation_definitions, is_document
from .exceptions import NoSuchOperationError
from .fetcher import default_fetcher
from .models import (
    Fetcher,
    FetcherOptions,
    GraphQLResult,
    OptionsInput,
    Queryable,
    coerce_options,
)

logger = logging.getLogger(__name__)

Source = Union[Mapping[str, Any], types.ModuleType]


def derive_call_name(key: str) -> str:
    """
    Derive the call name for a source key.

    The first character is lower-cased, then a trailing ``Document`` is
    stripped: ``"FooBarDocument" -> "fooBar"``, ``"Noop" -> "noop"``. A bare
    ``"Document"`` key becomes ``"document"``, never an empty name.
    """
    name = key[:1].lower() + key[1:]
    if name.endswith(DOCUMENT_SUFFIX):
        name = name[: -len(DOCUMENT_SUFFIX)]
    return name


def _source_items(source: Source) -> Iterator[Tuple[str, Any]]:
    if isinstance(source, types.ModuleType):
        for key, value in vars(source).items():
            if not key.startswith("_"):
                yield key, value
    else:
        yield from source.items()


def _missing_operation(name: str) -> Queryable[Any, Any]:
    async def queryable(
        variables: Optional[Dict[str, Any]] = None,
        options: OptionsInput = None,
    ) -> GraphQLResult:
        raise NoSuchOperationError(f"No such operation: {name}", name=name)

    queryable.__name__ = name
    return queryable


class OperationClient(Mapping[str, Queryable[Any, Any]]):
    """
    Read-only mapping of call name to bound operation.

    Operations are reachable both as items and as attributes:

        ```python
        result = await client.bookByTitle({"title": "The Great Gatsby"})
        result = await client["bookByTitle"]({"title": "The Great Gatsby"})
        ```
    """

    def __init__(self, operations: Dict[str, Queryable[Any, Any]], endpoint: str) -> None:
        self._operations = operations
        self.endpoint = endpoint

    def __getitem__(self, name: str) -> Queryable[Any, Any]:
        return self._operations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __getattr__(self, name: str) -> Queryable[Any, Any]:
        operations = self.__dict__.get("_operations", {})
        try:
            return operations[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} has no operation {name!r}"
            ) from None

    def __dir__(self) -> list:
        return sorted(set(super().__dir__()) | set(self._operations))

    def __repr__(self) -> str:
        return f"OperationClient(endpoint={self.endpoint!r}, operations={list(self._operations)!r})"


def GraphQLClient(
    source: Source,
    endpoint: str,
    fetcher: Optional[Fetcher] = None,
    options: OptionsInput = None,
) -> OperationClient:
    """
    Build a client with one callable per operation document in ``source``.

    Entries that are not parsed documents are ignored. For each document the
    first operation definition is bound with ``fetcher`` (the aiohttp
    :func:`~graphql_fetch.fetcher.default_fetcher` by default). A document
    without operations yields a callable that raises
    :class:`~graphql_fetch.exceptions.NoSuchOperationError` when awaited.
    When two keys derive the same call name, the later one wins.

    Binding performs no network I/O.

    Args:
        source: Mapping (or module) of names to documents
        endpoint: GraphQL endpoint URL
        fetcher: Transport used to bind each document
        options: Client-level options applied to every call

    Returns:
        OperationClient mapping call names to awaitable callables

    Examples:
        ```python
        from graphql_fetch import GraphQLClient, documents_from_source

        client = GraphQLClient(
            source=documents_from_source(open("books.graphql").read()),
            endpoint="http://localhost:4000/graphql",
            options={"fetch_options": {"headers": {"X-Client": "docs"}}},
        )
        result = await client.books({})
        if result.errors is None:
            print(result.data["books"])
        ```
    """
    fetcher = fetcher or default_fetcher
    client_options: Optional[FetcherOptions] = coerce_options(options)

    operations: Dict[str, Queryable[Any, Any]] = {}
    skipped = 0
    for key, value in _source_items(source):
        if not is_document(value):
            skipped += 1
            continue

        name = derive_call_name(key)
        definitions = get_operation_definitions(value)
        if not definitions:
            logger.debug(f"{key} has no operation definition")
            operations[name] = _missing_operation(name)
            continue

        operations[name] = fetcher(
            endpoint=endpoint,
            query=value,
            operation_type=OperationType(definitions[0].operation),
            options=client_options,
        )

    logger.debug(
        f"Bound {len(operations)} operation(s) to {endpoint}: "
        f"{', '.join(operations)} ({skipped} entries skipped)"
    )
    return OperationClient(operations, endpoint)


def client_from_config(
    source: Source,
    config: Optional[ClientConfig] = None,
    fetcher: Optional[Fetcher] = None,
) -> OperationClient:
    """
    Build a client from a :class:`~graphql_fetch.config.ClientConfig`.

    When ``config`` is omitted it is loaded from the config file and
    ``GRAPHQL_FETCH_*`` environment variables.
    """
    config = config or load_config()
    if not config.endpoint:
        raise ValueError("No endpoint configured (set GRAPHQL_FETCH_ENDPOINT)")
    return GraphQLClient(
        source=source,
        endpoint=config.endpoint,
        fetcher=fetcher,
        options=config.to_fetcher_options(),
    )
