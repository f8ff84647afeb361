"""Schema cache: lazily introspect and persist subgraph schemas."""

from typing import Any

from curator.clients.subgraph import SubgraphClient
from curator.domain.exceptions import SchemaUnavailableError, SourceNotFoundError
from curator.observability import get_logger
from curator.observability.constants import LogEvents
from curator.repositories.subgraph import SubgraphRepository

logger = get_logger(__name__)

_RENDERED_KINDS = {
    "OBJECT": "type",
    "INTERFACE": "interface",
    "INPUT_OBJECT": "input",
    "ENUM": "enum",
}


def render_type_ref(ref: dict[str, Any] | None) -> str:
    """Render an introspected type reference as SDL (``[Pool!]!``)."""
    if not ref:
        return "Unknown"
    kind = ref.get("kind")
    if kind == "NON_NULL":
        return f"{render_type_ref(ref.get('ofType'))}!"
    if kind == "LIST":
        return f"[{render_type_ref(ref.get('ofType'))}]"
    return ref.get("name") or "Unknown"


def _render_field(field: dict[str, Any]) -> str:
    args = field.get("args") or []
    signature = ""
    if args:
        rendered = ", ".join(f"{a['name']}: {render_type_ref(a.get('type'))}" for a in args)
        signature = f"({rendered})"
    return f"  {field['name']}{signature}: {render_type_ref(field.get('type'))}"


def render_schema(schema: dict[str, Any]) -> str:
    """Render an introspected ``__schema`` object as SDL text.

    Built-in ``__`` types and scalars are skipped.
    """
    blocks: list[str] = []
    for type_def in schema.get("types") or []:
        name = type_def.get("name") or ""
        keyword = _RENDERED_KINDS.get(type_def.get("kind", ""))
        if not keyword or name.startswith("__"):
            continue

        if keyword == "enum":
            members = [f"  {v['name']}" for v in type_def.get("enumValues") or []]
        elif keyword == "input":
            members = [
                f"  {f['name']}: {render_type_ref(f.get('type'))}"
                for f in type_def.get("inputFields") or []
            ]
        else:
            members = [_render_field(f) for f in type_def.get("fields") or []]

        blocks.append("\n".join([f"{keyword} {name} {{", *members, "}"]))
    return "\n\n".join(blocks)


def query_root_fields(schema: dict[str, Any]) -> list[str]:
    """Names of the fields on the query root type."""
    query_type = (schema.get("queryType") or {}).get("name") or "Query"
    for type_def in schema.get("types") or []:
        if type_def.get("name") == query_type:
            return [f["name"] for f in type_def.get("fields") or []]
    return []


class SchemaCache:
    """Returns cached schema text, introspecting and persisting on a miss."""

    def __init__(
        self,
        repository: SubgraphRepository,
        client: SubgraphClient,
        timeout: float = 15.0,
    ):
        self.repository = repository
        self.client = client
        self.timeout = timeout

    async def ensure_schema(self, source_id: str) -> str:
        """Return the schema text of a subgraph, fetching it if not cached.

        Raises:
            SourceNotFoundError: If the id is not registered.
            SchemaUnavailableError: If introspection fails.
        """
        source = self.repository.get_by_id(source_id)
        if source is None:
            raise SourceNotFoundError(source_id)

        if source.schema_text:
            logger.debug(LogEvents.SCHEMA_CACHE_HIT, source_id=source_id)
            return source.schema_text

        logger.info(LogEvents.SCHEMA_CACHE_MISS, source_id=source_id)
        return await self._fetch_and_store(source_id, source.url, keep_entities=bool(source.entities))

    async def refresh_schema(self, source_id: str) -> str:
        """Re-introspect a subgraph regardless of the cached value."""
        source = self.repository.get_by_id(source_id)
        if source is None:
            raise SourceNotFoundError(source_id)
        return await self._fetch_and_store(source_id, source.url, keep_entities=bool(source.entities))

    async def _fetch_and_store(self, source_id: str, url: str, keep_entities: bool) -> str:
        try:
            schema = await self.client.introspect(source_id, url, self.timeout)
        except SchemaUnavailableError as e:
            logger.warning(LogEvents.SCHEMA_CACHE_FAILED, source_id=source_id, reason=e.reason)
            raise

        schema_text = render_schema(schema)
        if not schema_text:
            raise SchemaUnavailableError(source_id, "introspection returned no types")

        entities = None if keep_entities else query_root_fields(schema)
        self.repository.set_schema(source_id, schema_text, entities=entities)
        logger.info(
            LogEvents.SCHEMA_CACHE_STORED,
            source_id=source_id,
            schema_chars=len(schema_text),
        )
        return schema_text
