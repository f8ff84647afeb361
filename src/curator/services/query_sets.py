"""Query set service - stores query sets and executes them by id."""

import json
import time
from collections.abc import AsyncGenerator, Sequence

from curator.domain.exceptions import CuratorError, QuerySetNotFoundError
from curator.observability import get_logger
from curator.observability.constants import LogEvents
from curator.repositories.stored_query import StoredQueryRepository
from curator.repositories.subgraph import SubgraphRepository
from curator.schemas.internal import ExecutionResult
from curator.schemas.queries import Requirements, SourceQuerySpec, StoredQuerySet
from curator.schemas.responses import (
    ExecutionMetadata,
    ExecutionResponse,
    SourceError,
    SourceReport,
)
from curator.services.execution import ExecutionCoordinator
from curator.services.merge import MergeEngine

logger = get_logger(__name__)


def build_metadata(results: Sequence[ExecutionResult], execution_time_ms: int) -> ExecutionMetadata:
    """Aggregate per-source results into execution metadata."""
    return ExecutionMetadata(
        total_subgraphs=len(results),
        successful_subgraphs=sum(1 for r in results if r.succeeded),
        execution_time_ms=execution_time_ms,
        errors=[
            SourceError(source_id=r.source_id, error=r.error or r.status)
            for r in results
            if not r.succeeded
        ],
        sources=[
            SourceReport(
                source_id=r.source_id,
                status=r.status,
                rows=len(r.rows),
                timing=r.timing,
            )
            for r in results
        ],
    )


class QuerySetService:
    """Coordinates storage and re-execution of query sets.

    Execution:
    1. Load the stored query set (fatal if unknown)
    2. Resolve each spec's subgraph endpoint from the registry
    3. Run all specs concurrently through the execution coordinator
    4. Merge, sort and filter rows according to the stored requirements
    """

    def __init__(
        self,
        query_repository: StoredQueryRepository,
        subgraph_repository: SubgraphRepository,
        coordinator: ExecutionCoordinator,
        merge_engine: MergeEngine,
    ):
        self.query_repository = query_repository
        self.subgraph_repository = subgraph_repository
        self.coordinator = coordinator
        self.merge_engine = merge_engine

    def store_query_set(
        self,
        source_query_specs: Sequence[SourceQuerySpec],
        requirements: Requirements,
        path: str | None = None,
    ) -> str:
        """Persist a query set and return its generated id."""
        stored = self.query_repository.create(list(source_query_specs), requirements, path=path)
        if stored is None:
            raise CuratorError("Failed to store query set", "STORE_FAILED")
        logger.info(LogEvents.QUERY_SET_STORED, query_set_id=stored.id, specs=len(source_query_specs))
        return stored.id

    def get_query_set(self, query_set_id: str) -> StoredQuerySet:
        stored = self.query_repository.get_by_id(query_set_id)
        if stored is None:
            raise QuerySetNotFoundError(query_set_id)
        return stored

    def _endpoints(self, query_set: StoredQuerySet) -> dict[str, str]:
        sources = self.subgraph_repository.get_many(
            [spec.source_id for spec in query_set.source_query_specs]
        )
        return {source_id: source.url for source_id, source in sources.items()}

    async def execute_stored_query_set(self, query_set_id: str) -> ExecutionResponse:
        """Execute a stored query set and return unified rows plus metadata.

        Per-source failures are reported in ``metadata.errors``; only an
        unknown id raises.
        """
        query_set = self.get_query_set(query_set_id)
        start_time = time.perf_counter()
        logger.info(
            LogEvents.EXECUTION_STARTED,
            query_set_id=query_set_id,
            sources=len(query_set.source_query_specs),
        )

        results = await self.coordinator.execute(
            query_set.source_query_specs, self._endpoints(query_set)
        )
        rows = self.merge_engine.merge(results, query_set.requirements)

        metadata = build_metadata(results, int((time.perf_counter() - start_time) * 1000))
        logger.info(
            LogEvents.EXECUTION_COMPLETED,
            query_set_id=query_set_id,
            rows=len(rows),
            successful=metadata.successful_subgraphs,
            total=metadata.total_subgraphs,
            execution_time_ms=metadata.execution_time_ms,
        )
        return ExecutionResponse(rows=rows, metadata=metadata)

    def execute_stored_query_set_stream(self, query_set_id: str) -> AsyncGenerator[str, None]:
        """Execute a stored query set, yielding SSE-formatted progress events.

        Events: ``execution_start``, one ``source_complete`` per source as it
        finishes, then ``done`` with rows and metadata. The query set is
        resolved before the first event so an unknown id raises immediately,
        and endpoints are looked up before the response starts streaming.
        """
        query_set = self.get_query_set(query_set_id)
        return self._stream(query_set, self._endpoints(query_set))

    async def _stream(
        self, query_set: StoredQuerySet, endpoints: dict[str, str]
    ) -> AsyncGenerator[str, None]:
        start_time = time.perf_counter()
        specs = query_set.source_query_specs
        yield self._sse_event("execution_start", {"id": query_set.id, "sources": len(specs)})

        completed: dict[int, ExecutionResult] = {}
        async for index, result in self.coordinator.execute_streaming(specs, endpoints):
            completed[index] = result
            yield self._sse_event(
                "source_complete",
                {
                    "source_id": result.source_id,
                    "status": result.status,
                    "rows": len(result.rows),
                    "error": result.error,
                    "timing": result.timing.model_dump(),
                },
            )

        # Restore spec order so merging is independent of completion order
        results = [completed[index] for index in range(len(specs))]
        rows = self.merge_engine.merge(results, query_set.requirements)
        metadata = build_metadata(results, int((time.perf_counter() - start_time) * 1000))
        yield self._sse_event(
            "done",
            {"rows": rows, "metadata": metadata.model_dump(mode="json")},
        )

    def _sse_event(self, event_type: str, data: dict) -> str:
        """Format an SSE event."""
        return f"event: {event_type}\ndata: {json.dumps(data, default=str)}\n\n"
