"""Response schemas for the curator API."""

from typing import Literal

from pydantic import BaseModel, Field

from curator.schemas.internal import Row, SourceTiming


class SourceError(BaseModel):
    """An error reported by one source during execution."""

    source_id: str
    error: str


class SourceReport(BaseModel):
    """Status and timing of one source in an execution."""

    source_id: str
    status: Literal["success", "error", "timeout"]
    rows: int = Field(..., description="Number of rows the source contributed")
    timing: SourceTiming


class ExecutionMetadata(BaseModel):
    """Aggregate metadata about one execution of a stored query set."""

    total_subgraphs: int = Field(..., description="Number of sources queried")
    successful_subgraphs: int = Field(..., description="Number of sources that succeeded")
    execution_time_ms: int = Field(..., description="Wall-clock execution time")
    errors: list[SourceError] = Field(default_factory=list)
    sources: list[SourceReport] = Field(default_factory=list)


class ExecutionResponse(BaseModel):
    """Unified, sorted and filtered rows plus execution metadata."""

    rows: list[Row] = Field(default_factory=list)
    metadata: ExecutionMetadata


class EmbeddingRequest(BaseModel):
    """Request body for generating an embedding."""

    input: str = Field(..., min_length=1, max_length=1000)


class EmbeddingResponse(BaseModel):
    """Generated embedding."""

    embedding: list[float]
    text: str


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
