"""Execution coordinator: concurrent, fault-tolerant fan-out over subgraphs."""

import asyncio
from collections.abc import AsyncIterator, Mapping, Sequence

from curator.clients.subgraph import SubgraphClient
from curator.domain.exceptions import SourceFetchError
from curator.observability import StageTimer, get_logger
from curator.observability.constants import LogEvents
from curator.schemas.internal import ExecutionResult, SourceTiming
from curator.schemas.queries import SourceQuerySpec
from curator.services.transformation import TransformationInterpreter

logger = get_logger(__name__)


def _timing(timer: StageTimer) -> SourceTiming:
    return SourceTiming(
        fetch_ms=timer.get("fetch"),
        parse_ms=timer.get("parse"),
        transform_ms=timer.get("transform"),
        total_ms=timer.total_ms,
    )


class ExecutionCoordinator:
    """Runs every SourceQuerySpec of a query set concurrently.

    Each spec moves Pending -> Fetching -> Succeeded | Failed on its own task
    with its own timeout. Failures are recorded in the spec's ExecutionResult
    and never cancel sibling tasks; the coordinator waits for all of them.
    """

    def __init__(
        self,
        client: SubgraphClient,
        interpreter: TransformationInterpreter,
        timeout: float = 10.0,
    ):
        self.client = client
        self.interpreter = interpreter
        self.timeout = timeout

    async def execute(
        self,
        specs: Sequence[SourceQuerySpec],
        endpoints: Mapping[str, str],
    ) -> list[ExecutionResult]:
        """Execute all specs and return results in spec order.

        Args:
            specs: The per-source query specs to run.
            endpoints: Subgraph id -> GraphQL endpoint URL.

        Returns:
            One ExecutionResult per spec, in the order the specs were given.
        """
        if not specs:
            return []

        tasks = [self.run_spec(spec, endpoints.get(spec.source_id)) for spec in specs]
        results: list[ExecutionResult] = await asyncio.gather(*tasks)
        return results

    async def execute_streaming(
        self,
        specs: Sequence[SourceQuerySpec],
        endpoints: Mapping[str, str],
    ) -> AsyncIterator[tuple[int, ExecutionResult]]:
        """Execute all specs and yield ``(spec index, result)`` as each completes."""
        if not specs:
            return

        tasks = {
            asyncio.create_task(self.run_spec(spec, endpoints.get(spec.source_id))): index
            for index, spec in enumerate(specs)
        }
        pending = set(tasks)
        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    yield tasks[task], task.result()
        finally:
            for task in pending:
                task.cancel()

    async def run_spec(self, spec: SourceQuerySpec, url: str | None) -> ExecutionResult:
        """Fetch, parse and transform one spec. Never raises."""
        timer = StageTimer()
        log = logger.bind(source_id=spec.source_id)

        if not url:
            error = f"Subgraph '{spec.source_id}' is not registered"
            log.warning(LogEvents.EXECUTION_SOURCE_FAILED, error=error)
            return ExecutionResult(
                source_id=spec.source_id, status="error", error=error, timing=_timing(timer)
            )

        try:
            with timer.stage("fetch"):
                response = await self.client.post(url, spec.query, self.timeout)
            with timer.stage("parse"):
                items = self.client.parse(response)
            with timer.stage("transform"):
                rows = self.interpreter.apply_many(items, spec.mappings)
        except SourceFetchError as e:
            timing = _timing(timer)
            log.warning(
                LogEvents.EXECUTION_SOURCE_FAILED,
                status=e.status,
                error=e.message,
                **timing.model_dump(),
            )
            return ExecutionResult(
                source_id=spec.source_id, status=e.status, error=e.message, timing=timing
            )
        except Exception as e:
            timing = _timing(timer)
            log.exception(LogEvents.EXECUTION_SOURCE_UNEXPECTED, **timing.model_dump())
            return ExecutionResult(
                source_id=spec.source_id,
                status="error",
                error=f"Unexpected error: {e}",
                timing=timing,
            )

        timing = _timing(timer)
        log.info(LogEvents.EXECUTION_SOURCE_COMPLETED, rows=len(rows), **timing.model_dump())
        return ExecutionResult(
            source_id=spec.source_id, status="success", rows=rows, timing=timing
        )
