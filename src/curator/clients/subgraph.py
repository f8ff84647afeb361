"""Client for fetching GraphQL documents from subgraph endpoints.

A subgraph answers ``POST {"query": ...}`` with ``{"data": {<root>: [...]}}``.
The first array-valued field of ``data`` is the root entity list; a response
without one is a schema/query mismatch and is reported as
:class:`MalformedResponseError`, separately from transport failures.
"""

import asyncio
import json
from typing import Any

import httpx

from curator.domain.exceptions import (
    MalformedResponseError,
    SchemaUnavailableError,
    SourceFetchError,
    SourceTimeoutError,
    SourceTransportError,
)
from curator.observability import get_logger

logger = get_logger(__name__)

INTROSPECTION_QUERY = """
query IntrospectionQuery {
  __schema {
    queryType { name }
    types {
      kind
      name
      description
      fields(includeDeprecated: false) {
        name
        args { name type { ...TypeRef } }
        type { ...TypeRef }
      }
      inputFields { name type { ...TypeRef } }
      enumValues(includeDeprecated: false) { name }
    }
  }
}

fragment TypeRef on __Type {
  kind
  name
  ofType {
    kind
    name
    ofType {
      kind
      name
      ofType {
        kind
        name
        ofType { kind name }
      }
    }
  }
}
"""


def extract_root_items(payload: Any) -> list[Any]:
    """Return the root entity list of a GraphQL payload.

    Raises:
        MalformedResponseError: If there is no ``data`` object with an
            array-valued field.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError("Response body is not a JSON object")

    data = payload.get("data")
    if not isinstance(data, dict):
        errors = payload.get("errors")
        if errors:
            raise MalformedResponseError(f"Response has no data: {_format_errors(errors)}")
        raise MalformedResponseError("Response has no top-level data object")

    for value in data.values():
        if isinstance(value, list):
            return value

    raise MalformedResponseError(
        f"Response data has no array-valued root field (fields: {sorted(data)})"
    )


def _format_errors(errors: Any) -> str:
    if isinstance(errors, list):
        messages = [
            e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors
        ]
        return "; ".join(messages)[:500]
    return str(errors)[:500]


class SubgraphClient:
    """Client for querying GraphQL subgraph endpoints.

    One ``httpx.AsyncClient`` may be shared across concurrent fetches; pass it
    in to reuse connections, otherwise a client is opened per request.
    """

    def __init__(self, timeout: float = 10.0, http_client: httpx.AsyncClient | None = None):
        self.timeout = timeout
        self._http_client = http_client

    async def post(self, url: str, query: str, timeout: float | None = None) -> httpx.Response:
        """Send one GraphQL document, raced against the timeout.

        Raises:
            SourceTimeoutError: If no response arrives in time.
            SourceTransportError: On connection failures or non-2xx status.
        """
        effective_timeout = timeout if timeout is not None else self.timeout
        try:
            response = await asyncio.wait_for(
                self._send(url, query, effective_timeout),
                timeout=effective_timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise SourceTimeoutError(url, effective_timeout) from e
        except httpx.RequestError as e:
            raise SourceTransportError(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            raise SourceTransportError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    async def _send(self, url: str, query: str, timeout: float) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        body = {"query": query}
        if self._http_client is not None:
            return await self._http_client.post(
                url, json=body, headers=headers, timeout=httpx.Timeout(timeout)
            )
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
            return await client.post(url, json=body, headers=headers)

    def parse(self, response: httpx.Response) -> list[Any]:
        """Decode a response and return its root entity list.

        Raises:
            MalformedResponseError: If the body is not JSON or has no root list.
        """
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponseError(f"Response is not valid JSON: {e}") from e
        return extract_root_items(payload)

    async def fetch(self, url: str, query: str, timeout: float | None = None) -> list[Any]:
        """Fetch a GraphQL document and return the root entity list."""
        response = await self.post(url, query, timeout)
        return self.parse(response)

    async def introspect(
        self, source_id: str, url: str, timeout: float | None = None
    ) -> dict[str, Any]:
        """Run the introspection query and return ``data.__schema``.

        Raises:
            SchemaUnavailableError: On any fetch failure or an unexpected shape.
        """
        try:
            response = await self.post(url, INTROSPECTION_QUERY, timeout)
            payload = response.json()
        except SourceFetchError as e:
            raise SchemaUnavailableError(source_id, e.message) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SchemaUnavailableError(source_id, f"invalid JSON: {e}") from e

        data = payload.get("data") if isinstance(payload, dict) else None
        schema = data.get("__schema") if isinstance(data, dict) else None
        if not isinstance(schema, dict):
            reason = "response has no __schema"
            if isinstance(payload, dict) and payload.get("errors"):
                reason = _format_errors(payload["errors"])
            raise SchemaUnavailableError(source_id, reason)

        logger.debug("subgraph.introspection.completed", source_id=source_id, url=url)
        return schema
