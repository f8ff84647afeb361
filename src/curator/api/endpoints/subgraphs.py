"""Subgraph registry and similarity search endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from curator.api.dependencies import (
    get_registry_service,
    get_schema_cache,
    get_similarity_ranker,
)
from curator.schemas import (
    ErrorResponse,
    RankedSource,
    SourceCreate,
    SourceDescriptor,
    SourceUpdate,
)
from curator.services import SchemaCache, SimilarityRanker, SourceRegistryService

router = APIRouter(prefix="/subgraphs", tags=["subgraphs"])


@router.get("", response_model=list[SourceDescriptor])
async def list_subgraphs(
    registry: Annotated[SourceRegistryService, Depends(get_registry_service)],
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
) -> list[SourceDescriptor]:
    """List registered subgraphs."""
    return registry.list_sources(skip=skip, limit=limit)


@router.post("", response_model=list[SourceDescriptor], status_code=status.HTTP_201_CREATED)
async def import_subgraphs(
    sources: list[SourceCreate],
    registry: Annotated[SourceRegistryService, Depends(get_registry_service)],
) -> list[SourceDescriptor]:
    """Bulk import subgraphs (idempotent upsert by id)."""
    return registry.import_sources(sources)


@router.get(
    "/similar",
    response_model=list[RankedSource],
    responses={
        502: {"model": ErrorResponse, "description": "Upstream provider failure"},
        503: {"model": ErrorResponse, "description": "Embedding provider not configured"},
    },
)
async def similar_subgraphs(
    ranker: Annotated[SimilarityRanker, Depends(get_similarity_ranker)],
    name: str = Query(..., min_length=1, description="Free-text subgraph name or description"),
) -> list[RankedSource]:
    """
    Rank subgraphs by blended semantic and name similarity.

    Returns at most four candidates, each with its schema text populated.
    """
    return await ranker.rank(name)


@router.get(
    "/{source_id}",
    response_model=SourceDescriptor,
    responses={404: {"model": ErrorResponse}},
)
async def get_subgraph(
    source_id: str,
    registry: Annotated[SourceRegistryService, Depends(get_registry_service)],
) -> SourceDescriptor:
    """Get one subgraph."""
    return registry.get_source(source_id)


@router.patch(
    "/{source_id}",
    response_model=SourceDescriptor,
    responses={404: {"model": ErrorResponse}},
)
async def update_subgraph(
    source_id: str,
    update: SourceUpdate,
    registry: Annotated[SourceRegistryService, Depends(get_registry_service)],
) -> SourceDescriptor:
    """Update descriptive fields of a subgraph."""
    return registry.update_source(source_id, update)


@router.delete(
    "/{source_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_subgraph(
    source_id: str,
    registry: Annotated[SourceRegistryService, Depends(get_registry_service)],
) -> None:
    """Remove a subgraph from the registry."""
    registry.delete_source(source_id)


@router.post(
    "/{source_id}/schema",
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def refresh_subgraph_schema(
    source_id: str,
    schema_cache: Annotated[SchemaCache, Depends(get_schema_cache)],
) -> dict:
    """Re-introspect a subgraph and replace its cached schema."""
    schema_text = await schema_cache.refresh_schema(source_id)
    return {"id": source_id, "schema_text": schema_text}


@router.post(
    "/{source_id}/embedding",
    response_model=SourceDescriptor,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def refresh_subgraph_embedding(
    source_id: str,
    registry: Annotated[SourceRegistryService, Depends(get_registry_service)],
) -> SourceDescriptor:
    """Recompute the embedding used for semantic search."""
    return await registry.refresh_embedding(source_id)
