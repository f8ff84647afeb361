"""Embedding provider client.

Uses the Generative Language ``embedContent`` REST endpoint. Every call for
one configured model returns vectors of the same dimensionality.
"""

import time
from typing import Any

import httpx

from curator.domain.exceptions import ConfigurationError, EmbeddingProviderError
from curator.observability import get_logger
from curator.observability.constants import LogEvents

logger = get_logger(__name__)


class EmbeddingClient:
    """Async HTTP client for computing text embeddings."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str | None,
        model: str = "text-embedding-004",
        base_url: str | None = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = httpx.Timeout(timeout)

    def _model_path(self) -> str:
        return self.model if self.model.startswith("models/") else f"models/{self.model}"

    async def embed(self, text: str) -> list[float]:
        """Compute the embedding vector of ``text``.

        Raises:
            ConfigurationError: If no API key is configured.
            EmbeddingProviderError: If the provider fails or answers unexpectedly.
        """
        if not self.api_key:
            raise ConfigurationError(
                "Embedding provider API key is not configured (CURATOR_EMBEDDING_API_KEY)"
            )

        start_time = time.perf_counter()
        model_path = self._model_path()
        url = f"{self.base_url}/{model_path}:embedContent"
        request_data = {
            "model": model_path,
            "content": {"parts": [{"text": text}]},
        }
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(url, json=request_data, headers=headers)
            except httpx.TimeoutException as e:
                logger.warning(LogEvents.EMBEDDING_FAILED, reason="timeout")
                raise EmbeddingProviderError("Embedding request timed out") from e
            except httpx.RequestError as e:
                logger.warning(LogEvents.EMBEDDING_FAILED, reason=str(e))
                raise EmbeddingProviderError(f"Embedding request failed: {e}") from e

        if response.status_code >= 400:
            detail = self._extract_error_detail(response)
            logger.warning(
                LogEvents.EMBEDDING_FAILED,
                status_code=response.status_code,
                reason=detail,
            )
            raise EmbeddingProviderError(
                f"Embedding provider error: {detail}", status_code=response.status_code
            )

        values = self._parse_embedding(response)
        logger.info(
            LogEvents.EMBEDDING_COMPLETED,
            dimensions=len(values),
            latency_ms=int((time.perf_counter() - start_time) * 1000),
        )
        return values

    def _extract_error_detail(self, response: httpx.Response) -> str:
        """Extract error detail from response."""
        try:
            data = response.json()
            return str(data.get("error", {}).get("message", response.text[:200]))
        except Exception:
            return response.text[:200]

    def _parse_embedding(self, response: httpx.Response) -> list[float]:
        try:
            data: Any = response.json()
            values = data["embedding"]["values"]
            return [float(v) for v in values]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbeddingProviderError(f"Unexpected embedding response: {e}") from e
