"""
Session cookie store.

A flat, in-memory ``name -> value`` jar used to carry session cookies across
calls that do not share an HTTP session. There is no domain or path scoping
and no expiry handling.
"""

import logging
from typing import Dict, Iterable, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


class CookieStore:
    """
    In-memory cookie jar.

    Not synchronised: when one store is shared by concurrent calls, the last
    response processed wins for any given cookie name.

    Examples:
        ```python
        store = CookieStore()
        client = GraphQLClient(
            source=documents,
            endpoint="http://localhost:4000/graphql",
            options={"cookie_store": store},
        )
        await client.login({})
        await client.isLoggedIn({})  # sends "Cookie: session=..."
        ```
    """

    def __init__(self, cookies: Optional[Dict[str, str]] = None) -> None:
        self._cookies: Dict[str, str] = dict(cookies or {})

    def get(self, name: str) -> Optional[str]:
        """Get a cookie value, or None if the cookie is not stored."""
        return self._cookies.get(name)

    def set(self, name: str, value: str) -> None:
        """Store a cookie, replacing any previous value for the same name."""
        self._cookies[name] = value

    def serialize(self) -> str:
        """Render all cookies as a ``Cookie`` header value, in insertion order."""
        return ";".join(f"{name}={value}" for name, value in self._cookies.items())

    def update_from_set_cookie(self, headers: Iterable[str]) -> None:
        """
        Ingest ``Set-Cookie`` header values.

        Only the leading ``name=value`` pair of each header is kept; cookie
        attributes (``Path``, ``HttpOnly``, ...) are dropped. The pair is split
        on the first ``=`` so values may themselves contain ``=``. Headers
        without ``=`` are ignored.

        Args:
            headers: Raw ``Set-Cookie`` header values from one response
        """
        for header in headers:
            pair = header.split(";", 1)[0]
            if "=" not in pair:
                logger.debug(f"Ignoring Set-Cookie without a value: {pair!r}")
                continue
            name, value = pair.split("=", 1)
            self.set(name.strip(), value.strip())

    def items(self) -> Iterable[Tuple[str, str]]:
        return self._cookies.items()

    def clear(self) -> None:
        self._cookies.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._cookies

    def __iter__(self) -> Iterator[str]:
        return iter(self._cookies)

    def __len__(self) -> int:
        return len(self._cookies)

    def __repr__(self) -> str:
        return f"CookieStore(names={list(self._cookies)!r})"
