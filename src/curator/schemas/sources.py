"""Subgraph registry schemas."""

from pydantic import BaseModel, Field


class SourceDescriptor(BaseModel):
    """Identity and cached metadata of one external subgraph."""

    id: str = Field(..., description="Stable registry id")
    name: str = Field(..., description="Display name")
    url: str = Field(..., description="GraphQL endpoint URL")
    protocol: str = Field(default="", description="Protocol the subgraph indexes")
    chain: str = Field(default="", description="Chain the subgraph indexes")
    queries_per_day: int = Field(default=0, description="Popularity signal")
    stake_amount: int = Field(default=0, description="Curation stake signal")
    entities: list[str] = Field(default_factory=list, description="Top-level query root names")
    embedding_vector: list[float] | None = Field(
        default=None, description="Embedding of the source description, filled lazily"
    )
    schema_text: str | None = Field(default=None, description="Introspected schema, filled lazily")


class SourceCreate(BaseModel):
    """One entry of a bulk import."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    protocol: str = ""
    chain: str = ""
    queries_per_day: int = Field(default=0, ge=0)
    stake_amount: int = Field(default=0, ge=0)
    entities: list[str] = Field(default_factory=list)
    embedding_vector: list[float] | None = None
    schema_text: str | None = None


class SourceUpdate(BaseModel):
    """Partial update of a registry entry."""

    name: str | None = None
    url: str | None = None
    protocol: str | None = None
    chain: str | None = None
    queries_per_day: int | None = Field(default=None, ge=0)
    stake_amount: int | None = Field(default=None, ge=0)
    entities: list[str] | None = None


class RankedSource(BaseModel):
    """A ranked candidate returned by similarity search."""

    source: SourceDescriptor
    semantic_score: float = Field(..., description="Cosine similarity to the query")
    lexical_score: float = Field(default=0.0, description="Name match score")
    score: float = Field(..., description="Blended final score")
