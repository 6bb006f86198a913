"""
Unit tests for the default aiohttp fetcher.

Network traffic is mocked with aioresponses.
"""

import asyncio
import json

import aiohttp
import pytest
from aioresponses import aioresponses
from graphql import OperationType, print_ast

from graphql_documents import BookByTitleDocument, BooksDocument, LoginDocument
from graphql_fetch import (
    ConnectionError,
    ContentError,
    CookieStore,
    GraphQLFetchError,
    GraphQLResult,
    NetworkError,
    TimeoutError,
    default_fetcher,
)


def _only_request(m):
    """Return the kwargs of the single request recorded by aioresponses."""
    calls = [call for calls in m.requests.values() for call in calls]
    assert len(calls) == 1
    return calls[0].kwargs


class TestRequest:
    """Test what the fetcher sends."""

    @pytest.mark.asyncio
    async def test_posts_query_and_variables(self, endpoint):
        queryable = default_fetcher(
            endpoint=endpoint,
            query=BookByTitleDocument,
            operation_type=OperationType.QUERY,
        )

        with aioresponses() as m:
            m.post(endpoint, payload={"data": {"findBookByTitle": None}})
            result = await queryable({"title": "Dune"})

            request = _only_request(m)

        assert isinstance(result, GraphQLResult)
        assert json.loads(request["data"]) == {
            "query": print_ast(BookByTitleDocument.document),
            "variables": {"title": "Dune"},
        }
        assert request["headers"]["Content-Type"] == "application/json"
        assert "Cookie" not in request["headers"]

    @pytest.mark.asyncio
    async def test_missing_variables_default_to_empty_object(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, payload={"data": {"books": []}})
            await queryable()

            request = _only_request(m)

        assert json.loads(request["data"])["variables"] == {}

    @pytest.mark.asyncio
    async def test_text_query_is_sent_verbatim(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query="{ books { title } }")

        with aioresponses() as m:
            m.post(endpoint, payload={"data": {"books": []}})
            await queryable({})

            request = _only_request(m)

        assert json.loads(request["data"])["query"] == "{ books { title } }"

    @pytest.mark.asyncio
    async def test_header_layering(self, endpoint):
        queryable = default_fetcher(
            endpoint=endpoint,
            query=BooksDocument,
            options={"fetch_options": {"headers": {"Authorization": "Bearer a", "X-App": "docs"}}},
        )

        with aioresponses() as m:
            m.post(endpoint, payload={"data": {}})
            await queryable({}, {"fetch_options": {"headers": {"Authorization": "Bearer b"}}})

            request = _only_request(m)

        assert request["headers"] == {
            "Authorization": "Bearer b",
            "X-App": "docs",
            "Content-Type": "application/json",
        }

    @pytest.mark.asyncio
    async def test_transport_options_forwarded(self, endpoint):
        queryable = default_fetcher(
            endpoint=endpoint,
            query=BooksDocument,
            options={"fetch_options": {"credentials": "include", "proxy": "http://proxy:3128"}},
        )

        with aioresponses() as m:
            m.post(endpoint, payload={"data": {}})
            await queryable({}, {"fetch_options": {"timeout": 5}})

            request = _only_request(m)

        assert request["proxy"] == "http://proxy:3128"
        assert request["timeout"] == aiohttp.ClientTimeout(total=5)
        assert "credentials" not in request

    @pytest.mark.asyncio
    async def test_transport_owned_options_cannot_change_the_request(self, endpoint):
        queryable = default_fetcher(
            endpoint=endpoint,
            query=BooksDocument,
            options={"fetch_options": {"method": "GET", "json": {"query": "{ x }"}}},
        )

        with aioresponses() as m:
            m.post(endpoint, payload={"data": {"books": []}})
            result = await queryable({}, {"fetch_options": {"data": "ignored"}})

            request = _only_request(m)

        assert result.data == {"books": []}
        assert [method for method, _ in m.requests] == ["POST"]
        assert "json" not in request
        assert json.loads(request["data"])["query"] == print_ast(BooksDocument.document)

    @pytest.mark.asyncio
    async def test_content_type_replaced_regardless_of_case(self, endpoint):
        queryable = default_fetcher(
            endpoint=endpoint,
            query=BooksDocument,
            options={"fetch_options": {"headers": {"content-type": "text/plain"}}},
        )

        with aioresponses() as m:
            m.post(endpoint, payload={"data": {}})
            await queryable({})

            request = _only_request(m)

        assert request["headers"] == {"Content-Type": "application/json"}

    @pytest.mark.asyncio
    async def test_caller_session_is_reused_and_left_open(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        async with aiohttp.ClientSession() as session:
            with aioresponses() as m:
                m.post(endpoint, payload={"data": {"books": []}})
                result = await queryable({}, {"session": session})

            assert result.data == {"books": []}
            assert not session.closed


class TestCookies:
    """Cookie capture and replay."""

    @pytest.mark.asyncio
    async def test_set_cookie_captured_and_replayed(self, endpoint):
        store = CookieStore()
        login = default_fetcher(
            endpoint=endpoint,
            query=LoginDocument,
            operation_type=OperationType.MUTATION,
            options={"cookie_store": store},
        )
        books = default_fetcher(
            endpoint=endpoint, query=BooksDocument, options={"cookie_store": store}
        )

        with aioresponses() as m:
            m.post(
                endpoint,
                payload={"data": {"login": True}},
                headers={"Set-Cookie": "token=YWJj=; Path=/; HttpOnly"},
            )
            m.post(endpoint, payload={"data": {"books": []}})

            await login({})
            await books({})

            calls = [call for calls in m.requests.values() for call in calls]

        assert store.get("token") == "YWJj="
        assert "Cookie" not in calls[0].kwargs["headers"]
        assert calls[1].kwargs["headers"]["Cookie"] == "token=YWJj="

    @pytest.mark.asyncio
    async def test_set_cookie_ignored_without_store(self, endpoint):
        store = CookieStore()
        queryable = default_fetcher(endpoint=endpoint, query=LoginDocument)

        with aioresponses() as m:
            m.post(
                endpoint,
                payload={"data": {"login": True}},
                headers={"Set-Cookie": "session=1"},
            )
            await queryable({})

        assert len(store) == 0


class TestResponse:
    """Response handling and failure semantics."""

    @pytest.mark.asyncio
    async def test_graphql_errors_are_data(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(
                endpoint,
                status=400,
                payload={"errors": [{"message": "Cannot query field"}]},
            )
            result = await queryable({})

        assert result.data is None
        assert result.error_messages == ["Cannot query field"]

    @pytest.mark.asyncio
    async def test_extensions_kept(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, payload={"data": {"books": []}, "extensions": {"cost": 3}})
            result = await queryable({})

        assert result.errors is None
        assert result.extensions == {"cost": 3}

    @pytest.mark.asyncio
    async def test_malformed_json(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, body="<html>Bad Gateway</html>", status=502)
            with pytest.raises(ContentError) as exc_info:
                await queryable({})

        assert exc_info.value.status_code == 502
        assert exc_info.value.url == endpoint

    @pytest.mark.asyncio
    async def test_undecodable_body(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, body=b"\xff\xfe\xfd")
            with pytest.raises(ContentError) as exc_info:
                await queryable({})

        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_non_object_body(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, payload=[1, 2, 3])
            with pytest.raises(ContentError):
                await queryable({})

    @pytest.mark.asyncio
    async def test_connection_error(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, exception=aiohttp.ClientConnectionError("refused"))
            with pytest.raises(ConnectionError) as exc_info:
                await queryable({})

        assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_timeout(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, exception=asyncio.TimeoutError())
            with pytest.raises(TimeoutError):
                await queryable({})

    @pytest.mark.asyncio
    async def test_other_client_error(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, exception=aiohttp.ClientError("boom"))
            with pytest.raises(NetworkError):
                await queryable({})

    @pytest.mark.asyncio
    async def test_failures_are_not_retried(self, endpoint):
        queryable = default_fetcher(endpoint=endpoint, query=BooksDocument)

        with aioresponses() as m:
            m.post(endpoint, exception=aiohttp.ClientConnectionError("refused"))
            m.post(endpoint, payload={"data": {"books": []}})
            with pytest.raises(GraphQLFetchError):
                await queryable({})

            calls = [call for calls in m.requests.values() for call in calls]

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_connection_refused_against_real_socket(self, unused_tcp_port):
        queryable = default_fetcher(
            endpoint=f"http://127.0.0.1:{unused_tcp_port}/graphql", query=BooksDocument
        )

        with pytest.raises(ConnectionError):
            await queryable({})
