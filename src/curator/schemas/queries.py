"""Query set schemas: field mappings, per-source specs and requirements."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FieldMapping(BaseModel):
    """Maps one field of a subgraph item to a column of the unified row."""

    field: str = Field(..., min_length=1, description="Dot-separated path into the source item")
    alias: str = Field(..., min_length=1, description="Output column name")
    transformation: str | None = Field(
        default=None,
        description="Optional transform name (parseFloat, parseInt, toString, toFixed2, multiply100)",
    )

    model_config = ConfigDict(frozen=True)


class SourceQuerySpec(BaseModel):
    """One planned fetch: a GraphQL document against one subgraph."""

    source_id: str = Field(..., min_length=1, description="Registry id of the subgraph")
    query: str = Field(..., min_length=1, description="GraphQL query document")
    mappings: list[FieldMapping] = Field(default_factory=list, description="Ordered field mappings")

    model_config = ConfigDict(frozen=True)


class SpecialRequirements(BaseModel):
    """Sort and filter directives extracted from the user's request."""

    needs_comparison: bool = False
    sort_by: str = Field(default="none", description="Row column to sort on, or 'none'")
    additional_filters: list[str] = Field(
        default_factory=list, description="Filters in 'field:operation:value' form"
    )

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Requirements(BaseModel):
    """Structured requirements record produced by request understanding."""

    protocols: list[str] = Field(default_factory=list)
    chains: list[str] = Field(default_factory=list)
    temporal: str = ""
    metrics: list[str] = Field(default_factory=list)
    special_requirements: SpecialRequirements = Field(default_factory=SpecialRequirements)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @property
    def sort_by(self) -> str:
        return self.special_requirements.sort_by

    @property
    def additional_filters(self) -> list[str]:
        return self.special_requirements.additional_filters


class QuerySetCreate(BaseModel):
    """Request body for storing a query set."""

    source_query_specs: list[SourceQuerySpec] = Field(default_factory=list)
    requirements: Requirements = Field(default_factory=Requirements)
    path: str | None = Field(default=None, description="Optional label for the query set")


class QuerySetCreated(BaseModel):
    """Response after storing a query set."""

    id: str


class StoredQuerySet(BaseModel):
    """A persisted, re-executable bundle of per-source queries and requirements."""

    id: str
    source_query_specs: list[SourceQuerySpec] = Field(default_factory=list)
    requirements: Requirements = Field(default_factory=Requirements)
    path: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(frozen=True)
