"""Internal DTOs used within the curator service."""

from typing import Any, Literal

from pydantic import BaseModel, Field

# One unified record; keys are mapping aliases.
Row = dict[str, Any]


class SourceTiming(BaseModel):
    """Per-stage timing of one source execution (diagnostic only)."""

    fetch_ms: int = 0
    parse_ms: int = 0
    transform_ms: int = 0
    total_ms: int = 0


class ExecutionResult(BaseModel):
    """Result of executing one SourceQuerySpec."""

    source_id: str = Field(..., description="Registry id of the subgraph")
    status: Literal["success", "error", "timeout"] = Field(..., description="Execution status")
    rows: list[Row] = Field(default_factory=list, description="Transformed rows")
    error: str | None = Field(default=None, description="Error message if failed")
    timing: SourceTiming = Field(default_factory=SourceTiming)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"
