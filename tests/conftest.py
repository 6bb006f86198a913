"""
Shared test fixtures for the graphql_fetch test suite.

``graphql_server`` runs a real aiohttp server over the schema in
``graphql_schema``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from graphql import graphql

from graphql_schema import root_value, schema


@dataclass
class RunningServer:
    """A started test server and the requests it has received."""

    url: str
    requests: List[Dict[str, Any]] = field(default_factory=list)

    def headers(self, index: int = -1) -> Dict[str, str]:
        return self.requests[index]["headers"]


async def _graphql_handler(request: web.Request) -> web.Response:
    payload = await request.json()
    request.app["requests"].append(
        {"headers": dict(request.headers), "body": payload}
    )

    context: Dict[str, Any] = {"request": request, "set_cookies": {}}
    result = await graphql(
        schema,
        payload["query"],
        root_value=root_value,
        context_value=context,
        variable_values=payload.get("variables"),
    )

    response = web.json_response(result.formatted)
    for name, value in context["set_cookies"].items():
        response.set_cookie(name, value)
    return response


@pytest.fixture
async def graphql_server():
    """Start the test GraphQL server and yield its endpoint."""
    app = web.Application()
    app["requests"] = []
    app.router.add_post("/graphql", _graphql_handler)

    server = TestServer(app)
    await server.start_server()
    try:
        yield RunningServer(url=str(server.make_url("/graphql")), requests=app["requests"])
    finally:
        await server.close()


@pytest.fixture
def endpoint() -> str:
    """Endpoint used with mocked (aioresponses) transports."""
    return "https://api.example.com/graphql"
