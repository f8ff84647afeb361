"""Stored query set repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from curator.database.models import StoredQueryModel
from curator.repositories.base import BaseRepository
from curator.schemas.queries import Requirements, SourceQuerySpec, StoredQuerySet

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def to_query_set(model: StoredQueryModel) -> StoredQuerySet:
    """Convert a stored row to a StoredQuerySet."""
    return StoredQuerySet(
        id=model.id,
        path=model.path,
        source_query_specs=[
            SourceQuerySpec.model_validate(spec) for spec in (model.subgraph_queries or [])
        ],
        requirements=Requirements.model_validate(model.requirements or {}),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class StoredQueryRepository(BaseRepository[StoredQueryModel]):
    """Repository for stored query sets."""

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        super().__init__(session, StoredQueryModel)

    def get_by_id(self, query_set_id: str) -> StoredQuerySet | None:
        model = self._get(query_set_id)
        return to_query_set(model) if model else None

    def create(
        self,
        source_query_specs: list[SourceQuerySpec],
        requirements: Requirements,
        path: str | None = None,
    ) -> StoredQuerySet | None:
        model = self._create(
            path=path,
            subgraph_queries=[spec.model_dump(mode="json") for spec in source_query_specs],
            requirements=requirements.model_dump(mode="json"),
        )
        return to_query_set(model) if model else None
