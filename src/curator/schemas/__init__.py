"""Schemas package - request/response models for the curator."""

from curator.schemas.internal import ExecutionResult, Row, SourceTiming
from curator.schemas.queries import (
    FieldMapping,
    QuerySetCreate,
    QuerySetCreated,
    Requirements,
    SourceQuerySpec,
    SpecialRequirements,
    StoredQuerySet,
)
from curator.schemas.responses import (
    EmbeddingRequest,
    EmbeddingResponse,
    ErrorResponse,
    ExecutionMetadata,
    ExecutionResponse,
    SourceError,
    SourceReport,
)
from curator.schemas.sources import (
    RankedSource,
    SourceCreate,
    SourceDescriptor,
    SourceUpdate,
)

__all__ = [
    # Queries
    "FieldMapping",
    "QuerySetCreate",
    "QuerySetCreated",
    "Requirements",
    "SourceQuerySpec",
    "SpecialRequirements",
    "StoredQuerySet",
    # Sources
    "RankedSource",
    "SourceCreate",
    "SourceDescriptor",
    "SourceUpdate",
    # Responses
    "EmbeddingRequest",
    "EmbeddingResponse",
    "ErrorResponse",
    "ExecutionMetadata",
    "ExecutionResponse",
    "SourceError",
    "SourceReport",
    # Internal
    "ExecutionResult",
    "Row",
    "SourceTiming",
]
