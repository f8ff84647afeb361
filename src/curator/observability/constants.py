"""Constants for observability layer."""

# HTTP header for correlation ID propagation
CORRELATION_ID_HEADER = "X-Correlation-ID"

# Log event names following the pattern: {domain}.{action}.{result}
class LogEvents:
    """Standardized log event names."""

    # Execution events
    EXECUTION_STARTED = "execution.request.started"
    EXECUTION_COMPLETED = "execution.request.completed"
    EXECUTION_SOURCE_COMPLETED = "execution.source.completed"
    EXECUTION_SOURCE_FAILED = "execution.source.failed"
    EXECUTION_SOURCE_UNEXPECTED = "execution.source.unexpected"

    # Merge events
    MERGE_COMPLETED = "merge.rows.completed"

    # Ranking events
    RANKING_STARTED = "ranking.request.started"
    RANKING_COMPLETED = "ranking.request.completed"

    # Schema cache events
    SCHEMA_CACHE_HIT = "schema.cache.hit"
    SCHEMA_CACHE_MISS = "schema.cache.miss"
    SCHEMA_CACHE_STORED = "schema.cache.stored"
    SCHEMA_CACHE_FAILED = "schema.cache.failed"

    # Embedding events
    EMBEDDING_COMPLETED = "embedding.request.completed"
    EMBEDDING_FAILED = "embedding.request.failed"

    # Registry events
    REGISTRY_IMPORTED = "registry.sources.imported"
    REGISTRY_EMBEDDING_REFRESHED = "registry.embedding.refreshed"

    # Query set events
    QUERY_SET_STORED = "query_set.store.completed"

    # Request lifecycle events
    REQUEST_STARTED = "request.started"
    REQUEST_COMPLETED = "request.completed"
    REQUEST_FAILED = "request.failed"
