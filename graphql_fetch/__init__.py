"""
graphql_fetch - typed GraphQL operation clients.

Build one awaitable function per GraphQL operation document, bound to a
single endpoint:

    ```python
    from graphql_fetch import CookieStore, GraphQLClient

    import generated_documents

    client = GraphQLClient(
        source=generated_documents,
        endpoint="http://localhost:4000/graphql",
        options={"cookie_store": CookieStore()},
    )
    result = await client.bookByTitle({"title": "The Great Gatsby"})
    ```
"""

from .client import GraphQLClient, OperationClient, client_from_config, derive_call_name
from .config import ClientConfig, ConfigLoader, LoggingConfig, LogLevel, load_config
from .cookies import CookieStore
from .documents import (
    TypedDocument,
    document_source,
    documents_from_source,
    get_operation_definitions,
    is_document,
    parse_document,
)
from .exceptions import (
    ConnectionError,
    ContentError,
    GraphQLFetchError,
    NetworkError,
    NoSuchOperationError,
    TimeoutError,
)
from .fetcher import default_fetcher
from .models import (
    Fetcher,
    FetcherOptions,
    FetchOptions,
    GraphQLResult,
    OperationType,
    Queryable,
    merge_fetcher_options,
)

__version__ = "0.1.0"

__all__ = [
    # Client factory
    "GraphQLClient",
    "OperationClient",
    "client_from_config",
    "derive_call_name",
    # Transport
    "default_fetcher",
    "Fetcher",
    "Queryable",
    # Models
    "FetchOptions",
    "FetcherOptions",
    "GraphQLResult",
    "OperationType",
    "merge_fetcher_options",
    # Session
    "CookieStore",
    # Documents
    "TypedDocument",
    "parse_document",
    "documents_from_source",
    "document_source",
    "get_operation_definitions",
    "is_document",
    # Configuration
    "ClientConfig",
    "ConfigLoader",
    "LoggingConfig",
    "LogLevel",
    "load_config",
    # Exceptions
    "GraphQLFetchError",
    "NoSuchOperationError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "ContentError",
]
