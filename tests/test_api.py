"""Tests for the HTTP API."""

from collections.abc import Generator
from unittest.mock import AsyncMock

import httpx
import pytest
import respx
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from curator.api.dependencies import get_embedding_client, get_subgraph_client
from curator.clients import EmbeddingClient, SubgraphClient
from curator.database.connection import get_db_session
from curator.domain.exceptions import ConfigurationError
from curator.main import app

AAVE_URL = "https://subgraphs.test/aave-v3-arbitrum"
COMPOUND_URL = "https://subgraphs.test/compound-v3-base"


@pytest.fixture
def embedding_client() -> AsyncMock:
    client = AsyncMock(spec=EmbeddingClient)
    client.embed.return_value = [1.0, 0.0]
    return client


@pytest.fixture
def client(test_session: Session, embedding_client: AsyncMock) -> Generator[TestClient, None, None]:
    """Test client wired to the per-test database and a mocked embedding provider."""

    def override_session() -> Generator[Session, None, None]:
        yield test_session

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_embedding_client] = lambda: embedding_client
    app.dependency_overrides[get_subgraph_client] = lambda: SubgraphClient(timeout=2.0)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def registered(client: TestClient) -> TestClient:
    payload = [
        {
            "id": "aave-v3-arbitrum",
            "name": "Aave V3 Arbitrum",
            "url": AAVE_URL,
            "protocol": "aave",
            "chain": "arbitrum",
            "embedding_vector": [0.95, 0.3122],
            "schema_text": "type Market { id: ID! }",
        },
        {
            "id": "compound-v3-base",
            "name": "Compound V3 Base",
            "url": COMPOUND_URL,
            "protocol": "compound",
            "chain": "base",
            "embedding_vector": [0.0, 1.0],
            "schema_text": "type Market { id: ID! }",
        },
    ]
    response = client.post("/api/v1/subgraphs", json=payload)
    assert response.status_code == 201
    return client


def _query_set_payload() -> dict:
    mappings = [
        {"field": "name", "alias": "market"},
        {"field": "totalValueLockedUSD", "alias": "tvl", "transformation": "parseFloat"},
    ]
    return {
        "source_query_specs": [
            {"source_id": "aave-v3-arbitrum", "query": "{ markets { name } }", "mappings": mappings},
            {"source_id": "compound-v3-base", "query": "{ markets { name } }", "mappings": mappings},
        ],
        "requirements": {
            "protocols": ["aave", "compound"],
            "specialRequirements": {"sortBy": "tvl", "additionalFilters": ["tvl:min:100"]},
        },
        "path": "/usdc-lending",
    }


class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "subgraph-curator"}

    def test_ready(self, client: TestClient) -> None:
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "ok"

    def test_correlation_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Correlation-ID": "trace-123"})
        assert response.headers["X-Correlation-ID"] == "trace-123"

    def test_correlation_id_is_generated(self, client: TestClient) -> None:
        response = client.get("/health")
        assert len(response.headers["X-Correlation-ID"]) == 36


class TestSubgraphEndpoints:
    """Tests for /api/v1/subgraphs."""

    def test_list(self, registered: TestClient) -> None:
        response = registered.get("/api/v1/subgraphs")

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == ["aave-v3-arbitrum", "compound-v3-base"]

    def test_get_unknown_is_404(self, client: TestClient) -> None:
        response = client.get("/api/v1/subgraphs/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "SOURCE_NOT_FOUND"

    def test_update_and_delete(self, registered: TestClient) -> None:
        response = registered.patch(
            "/api/v1/subgraphs/compound-v3-base", json={"queries_per_day": 42}
        )
        assert response.status_code == 200
        assert response.json()["queries_per_day"] == 42

        assert registered.delete("/api/v1/subgraphs/compound-v3-base").status_code == 204
        assert registered.get("/api/v1/subgraphs/compound-v3-base").status_code == 404

    def test_import_rejects_negative_counts(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/subgraphs",
            json=[{"id": "x", "name": "X", "url": "https://x.test", "stake_amount": -1}],
        )
        assert response.status_code == 422

    def test_similar(self, registered: TestClient) -> None:
        response = registered.get("/api/v1/subgraphs/similar", params={"name": "aave"})

        assert response.status_code == 200
        ranked = response.json()
        assert [r["source"]["id"] for r in ranked] == ["aave-v3-arbitrum"]
        assert ranked[0]["lexical_score"] == pytest.approx(0.8)
        assert ranked[0]["source"]["schema_text"] == "type Market { id: ID! }"

    def test_similar_without_provider_key_is_503(
        self, registered: TestClient, embedding_client: AsyncMock
    ) -> None:
        embedding_client.embed.side_effect = ConfigurationError("no key")

        response = registered.get("/api/v1/subgraphs/similar", params={"name": "aave"})

        assert response.status_code == 503
        assert response.json() == {"error": "CONFIGURATION_ERROR", "message": "no key"}

    @respx.mock
    def test_refresh_schema_failure_is_502(self, registered: TestClient) -> None:
        respx.post(AAVE_URL).mock(return_value=httpx.Response(500, text="down"))

        response = registered.post("/api/v1/subgraphs/aave-v3-arbitrum/schema")

        assert response.status_code == 502
        assert response.json()["error"] == "SCHEMA_UNAVAILABLE"

    def test_refresh_embedding(self, registered: TestClient) -> None:
        response = registered.post("/api/v1/subgraphs/compound-v3-base/embedding")

        assert response.status_code == 200
        assert response.json()["embedding_vector"] == [1.0, 0.0]


class TestQueryEndpoints:
    """Tests for /api/v1/queries."""

    def test_store_and_get(self, registered: TestClient) -> None:
        response = registered.post("/api/v1/queries", json=_query_set_payload())
        assert response.status_code == 201
        query_set_id = response.json()["id"]

        stored = registered.get(f"/api/v1/queries/{query_set_id}")

        assert stored.status_code == 200
        body = stored.json()
        assert body["path"] == "/usdc-lending"
        assert len(body["source_query_specs"]) == 2
        assert body["requirements"]["specialRequirements"]["sortBy"] == "tvl"

    @respx.mock
    def test_execute(self, registered: TestClient) -> None:
        respx.post(AAVE_URL).mock(
            return_value=httpx.Response(
                200,
                json={"data": {"markets": [{"name": "USDC", "totalValueLockedUSD": "500"}]}},
            )
        )
        respx.post(COMPOUND_URL).mock(side_effect=httpx.ConnectError("refused"))
        query_set_id = registered.post("/api/v1/queries", json=_query_set_payload()).json()["id"]

        response = registered.post(f"/api/v1/queries/{query_set_id}/execute")

        assert response.status_code == 200
        body = response.json()
        assert body["rows"] == [{"market": "USDC", "tvl": 500.0}]
        assert body["metadata"]["total_subgraphs"] == 2
        assert body["metadata"]["successful_subgraphs"] == 1
        assert body["metadata"]["errors"][0]["source_id"] == "compound-v3-base"

    @respx.mock
    def test_execute_stream(self, registered: TestClient) -> None:
        respx.post(AAVE_URL).mock(
            return_value=httpx.Response(
                200,
                json={"data": {"markets": [{"name": "USDC", "totalValueLockedUSD": "500"}]}},
            )
        )
        respx.post(COMPOUND_URL).mock(
            return_value=httpx.Response(200, json={"data": {"markets": []}})
        )
        query_set_id = registered.post("/api/v1/queries", json=_query_set_payload()).json()["id"]

        response = registered.post(f"/api/v1/queries/{query_set_id}/execute/stream")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.text.startswith("event: execution_start\n")
        assert response.text.count("event: source_complete\n") == 2
        assert "event: done\n" in response.text

    def test_execute_unknown_is_404(self, client: TestClient) -> None:
        response = client.post("/api/v1/queries/missing/execute")

        assert response.status_code == 404
        assert response.json()["error"] == "QUERY_SET_NOT_FOUND"

    def test_stream_unknown_is_404(self, client: TestClient) -> None:
        response = client.post("/api/v1/queries/missing/execute/stream")
        assert response.status_code == 404


class TestEmbeddingEndpoint:
    """Tests for /api/v1/embeddings/generate."""

    def test_generate(self, client: TestClient, embedding_client: AsyncMock) -> None:
        response = client.post("/api/v1/embeddings/generate", json={"input": "uniswap pools"})

        assert response.status_code == 200
        assert response.json() == {"embedding": [1.0, 0.0], "text": "uniswap pools"}
        embedding_client.embed.assert_awaited_once_with("uniswap pools")

    def test_rejects_long_input(self, client: TestClient) -> None:
        response = client.post("/api/v1/embeddings/generate", json={"input": "x" * 1001})
        assert response.status_code == 422
