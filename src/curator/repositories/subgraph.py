"""Subgraph (source registry) repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from curator.database.models import SubgraphModel
from curator.repositories.base import BaseRepository
from curator.schemas.sources import SourceCreate, SourceDescriptor

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def to_descriptor(model: SubgraphModel) -> SourceDescriptor:
    """Convert a registry row to a SourceDescriptor."""
    return SourceDescriptor(
        id=model.id,
        name=model.name,
        url=model.url,
        protocol=model.protocol or "",
        chain=model.chain or "",
        queries_per_day=model.queries_per_day or 0,
        stake_amount=model.stake_amount or 0,
        entities=list(model.entities or []),
        embedding_vector=list(model.embedding) if model.embedding is not None else None,
        schema_text=model.schema_text,
    )


class SubgraphRepository(BaseRepository[SubgraphModel]):
    """Repository for the source registry, keyed by subgraph id."""

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        super().__init__(session, SubgraphModel)

    def get_by_id(self, source_id: str) -> SourceDescriptor | None:
        model = self._get(source_id)
        return to_descriptor(model) if model else None

    def get_many(self, source_ids: list[str]) -> dict[str, SourceDescriptor]:
        """Return descriptors for the given ids; unknown ids are omitted."""
        found: dict[str, SourceDescriptor] = {}
        for source_id in dict.fromkeys(source_ids):
            descriptor = self.get_by_id(source_id)
            if descriptor is not None:
                found[source_id] = descriptor
        return found

    def list_all(self, skip: int = 0, limit: int | None = None) -> list[SourceDescriptor]:
        return [to_descriptor(m) for m in self._list(skip=skip, limit=limit)]

    def upsert(self, source: SourceCreate) -> SourceDescriptor | None:
        """Insert or replace a registry entry.

        An existing cached embedding or schema is kept when the incoming entry
        does not carry one.
        """
        existing = self._get(source.id)
        embedding = source.embedding_vector
        schema_text = source.schema_text
        if existing is not None:
            if embedding is None:
                embedding = existing.embedding
            if schema_text is None:
                schema_text = existing.schema_text

        merged = self._merge(
            SubgraphModel(
                id=source.id,
                name=source.name,
                url=source.url,
                protocol=source.protocol,
                chain=source.chain,
                queries_per_day=source.queries_per_day,
                stake_amount=source.stake_amount,
                entities=list(source.entities),
                embedding=embedding,
                schema_text=schema_text,
            )
        )
        return to_descriptor(merged) if merged else None

    def update(self, source_id: str, **fields: Any) -> SourceDescriptor | None:
        model = self._update(source_id, **fields)
        return to_descriptor(model) if model else None

    def set_schema(
        self, source_id: str, schema_text: str, entities: list[str] | None = None
    ) -> SourceDescriptor | None:
        fields: dict[str, Any] = {"schema_text": schema_text}
        if entities is not None:
            fields["entities"] = entities
        return self.update(source_id, **fields)

    def set_embedding(self, source_id: str, embedding: list[float]) -> SourceDescriptor | None:
        return self.update(source_id, embedding=embedding)
