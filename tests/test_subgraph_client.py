"""Tests for the subgraph GraphQL client."""

import httpx
import pytest
import respx

from curator.clients.subgraph import INTROSPECTION_QUERY, SubgraphClient, extract_root_items
from curator.domain.exceptions import (
    MalformedResponseError,
    SchemaUnavailableError,
    SourceTimeoutError,
    SourceTransportError,
)

URL = "https://subgraphs.test/aave-v3-arbitrum"


class TestExtractRootItems:
    """Tests for locating the root entity list."""

    def test_first_array_field(self) -> None:
        payload = {"data": {"meta": {"block": 1}, "markets": [{"id": "1"}], "pools": []}}
        assert extract_root_items(payload) == [{"id": "1"}]

    def test_empty_list_is_valid(self) -> None:
        assert extract_root_items({"data": {"markets": []}}) == []

    def test_missing_data_reports_graphql_errors(self) -> None:
        payload = {"errors": [{"message": "Type `Query` has no field `marketz`"}]}
        with pytest.raises(MalformedResponseError, match="marketz"):
            extract_root_items(payload)

    def test_no_array_field(self) -> None:
        with pytest.raises(MalformedResponseError, match="no array-valued root field"):
            extract_root_items({"data": {"market": {"id": "1"}}})

    def test_non_object_body(self) -> None:
        with pytest.raises(MalformedResponseError):
            extract_root_items(["not", "an", "object"])


class TestSubgraphClientFetch:
    """Tests for fetching a GraphQL document."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_returns_root_items(self) -> None:
        route = respx.post(URL).mock(
            return_value=httpx.Response(
                200, json={"data": {"markets": [{"name": "USDC"}, {"name": "DAI"}]}}
            )
        )

        client = SubgraphClient(timeout=5.0)
        items = await client.fetch(URL, "{ markets { name } }")

        assert items == [{"name": "USDC"}, {"name": "DAI"}]
        assert route.called
        sent = route.calls.last.request
        assert sent.headers["content-type"] == "application/json"
        assert b'"query"' in sent.content

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_2xx_is_transport_error(self) -> None:
        respx.post(URL).mock(return_value=httpx.Response(503, text="indexer unavailable"))

        client = SubgraphClient()
        with pytest.raises(SourceTransportError) as exc_info:
            await client.fetch(URL, "{ markets { name } }")

        assert exc_info.value.status_code == 503
        assert exc_info.value.status == "error"
        assert "indexer unavailable" in exc_info.value.message

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error_is_transport_error(self) -> None:
        respx.post(URL).mock(side_effect=httpx.ConnectError("connection refused"))

        client = SubgraphClient()
        with pytest.raises(SourceTransportError, match="connection refused"):
            await client.fetch(URL, "{ markets { name } }")

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_timeout_is_timeout_error(self) -> None:
        respx.post(URL).mock(side_effect=httpx.ReadTimeout("read timed out"))

        client = SubgraphClient(timeout=2.0)
        with pytest.raises(SourceTimeoutError) as exc_info:
            await client.fetch(URL, "{ markets { name } }")

        assert exc_info.value.status == "timeout"
        assert exc_info.value.timeout == 2.0

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json_is_malformed(self) -> None:
        respx.post(URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

        client = SubgraphClient()
        with pytest.raises(MalformedResponseError, match="not valid JSON"):
            await client.fetch(URL, "{ markets { name } }")

    @pytest.mark.asyncio
    @respx.mock
    async def test_shared_http_client_is_used(self) -> None:
        respx.post(URL).mock(
            return_value=httpx.Response(200, json={"data": {"pools": [{"id": "p"}]}})
        )

        async with httpx.AsyncClient() as http_client:
            client = SubgraphClient(http_client=http_client)
            items = await client.fetch(URL, "{ pools { id } }")

        assert items == [{"id": "p"}]


class TestSubgraphClientIntrospect:
    """Tests for schema introspection."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_schema(self) -> None:
        schema = {"queryType": {"name": "Query"}, "types": []}
        route = respx.post(URL).mock(
            return_value=httpx.Response(200, json={"data": {"__schema": schema}})
        )

        client = SubgraphClient()
        result = await client.introspect("aave-v3-arbitrum", URL)

        assert result == schema
        assert b"IntrospectionQuery" in route.calls.last.request.content
        assert "__schema" in INTROSPECTION_QUERY

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_failure_is_schema_unavailable(self) -> None:
        respx.post(URL).mock(return_value=httpx.Response(500, text="boom"))

        client = SubgraphClient()
        with pytest.raises(SchemaUnavailableError) as exc_info:
            await client.introspect("aave-v3-arbitrum", URL)

        assert exc_info.value.source_id == "aave-v3-arbitrum"
        assert exc_info.value.error_code == "SCHEMA_UNAVAILABLE"

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_schema_is_schema_unavailable(self) -> None:
        respx.post(URL).mock(
            return_value=httpx.Response(
                200, json={"errors": [{"message": "introspection disabled"}]}
            )
        )

        client = SubgraphClient()
        with pytest.raises(SchemaUnavailableError, match="introspection disabled"):
            await client.introspect("aave-v3-arbitrum", URL)
