"""Stored query set endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import StreamingResponse

from curator.api.dependencies import get_query_set_service
from curator.schemas import (
    ErrorResponse,
    ExecutionResponse,
    QuerySetCreate,
    QuerySetCreated,
    StoredQuerySet,
)
from curator.services import QuerySetService

router = APIRouter(prefix="/queries", tags=["queries"])


@router.post("", response_model=QuerySetCreated, status_code=status.HTTP_201_CREATED)
async def store_query_set(
    request: QuerySetCreate,
    service: Annotated[QuerySetService, Depends(get_query_set_service)],
) -> QuerySetCreated:
    """Store per-source queries and requirements for later execution."""
    query_set_id = service.store_query_set(
        request.source_query_specs, request.requirements, path=request.path
    )
    return QuerySetCreated(id=query_set_id)


@router.get(
    "/{query_set_id}",
    response_model=StoredQuerySet,
    responses={404: {"model": ErrorResponse}},
)
async def get_query_set(
    query_set_id: str,
    service: Annotated[QuerySetService, Depends(get_query_set_service)],
) -> StoredQuerySet:
    """Get a stored query set."""
    return service.get_query_set(query_set_id)


@router.post(
    "/{query_set_id}/execute",
    response_model=ExecutionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def execute_query_set(
    query_set_id: str,
    service: Annotated[QuerySetService, Depends(get_query_set_service)],
) -> ExecutionResponse:
    """
    Execute a stored query set against its live subgraphs.

    All subgraphs are queried concurrently. Sources that fail or time out are
    listed in `metadata.errors`; the remaining rows are still returned.
    """
    return await service.execute_stored_query_set(query_set_id)


@router.post(
    "/{query_set_id}/execute/stream",
    responses={404: {"model": ErrorResponse}},
)
async def execute_query_set_stream(
    query_set_id: str,
    service: Annotated[QuerySetService, Depends(get_query_set_service)],
) -> StreamingResponse:
    """
    Execute a stored query set with Server-Sent Events progress.

    - `execution_start`: `{"id": "...", "sources": N}`
    - `source_complete`: `{"source_id": "...", "status": "...", "rows": N, ...}`
    - `done`: `{"rows": [...], "metadata": {...}}`
    """
    return StreamingResponse(
        service.execute_stored_query_set_stream(query_set_id),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
