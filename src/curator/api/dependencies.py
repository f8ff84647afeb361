"""FastAPI dependencies for the curator API."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from curator.clients import EmbeddingClient, SubgraphClient
from curator.core.config import get_settings
from curator.database.connection import get_db_session
from curator.repositories import StoredQueryRepository, SubgraphRepository
from curator.services import (
    ExecutionCoordinator,
    MergeEngine,
    QuerySetService,
    RankingWeights,
    SchemaCache,
    SimilarityRanker,
    SourceRegistryService,
    TransformationInterpreter,
    TransformRegistry,
)


@lru_cache
def get_subgraph_client() -> SubgraphClient:
    """Get the subgraph client singleton."""
    settings = get_settings()
    return SubgraphClient(timeout=settings.source_timeout)


@lru_cache
def get_embedding_client() -> EmbeddingClient:
    """Get the embedding client singleton."""
    settings = get_settings()
    return EmbeddingClient(
        api_key=settings.embedding_api_key,
        model=settings.embedding_model,
        base_url=settings.embedding_base_url,
        timeout=settings.embedding_timeout,
    )


@lru_cache
def get_transformation_interpreter() -> TransformationInterpreter:
    """Get the interpreter with the transform registry built once."""
    return TransformationInterpreter(TransformRegistry.default())


def get_subgraph_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> SubgraphRepository:
    """Get SubgraphRepository dependency."""
    return SubgraphRepository(session)


def get_stored_query_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> StoredQueryRepository:
    """Get StoredQueryRepository dependency."""
    return StoredQueryRepository(session)


def get_schema_cache(
    repository: Annotated[SubgraphRepository, Depends(get_subgraph_repository)],
    client: Annotated[SubgraphClient, Depends(get_subgraph_client)],
) -> SchemaCache:
    """Get the schema cache."""
    return SchemaCache(repository, client, timeout=get_settings().introspection_timeout)


def get_similarity_ranker(
    embedding_client: Annotated[EmbeddingClient, Depends(get_embedding_client)],
    repository: Annotated[SubgraphRepository, Depends(get_subgraph_repository)],
    schema_cache: Annotated[SchemaCache, Depends(get_schema_cache)],
) -> SimilarityRanker:
    """Get the similarity ranker."""
    settings = get_settings()
    weights = RankingWeights(
        similarity_threshold=settings.similarity_threshold,
        candidate_limit=settings.semantic_candidate_limit,
        semantic_weight=settings.semantic_weight,
        lexical_weight=settings.lexical_weight,
        lexical_match_score=settings.lexical_match_score,
        top_k=settings.rank_top_k,
    )
    return SimilarityRanker(embedding_client, repository, schema_cache, weights)


def get_registry_service(
    repository: Annotated[SubgraphRepository, Depends(get_subgraph_repository)],
    embedding_client: Annotated[EmbeddingClient, Depends(get_embedding_client)],
) -> SourceRegistryService:
    """Get the source registry service."""
    return SourceRegistryService(repository, embedding_client)


def get_execution_coordinator(
    client: Annotated[SubgraphClient, Depends(get_subgraph_client)],
    interpreter: Annotated[TransformationInterpreter, Depends(get_transformation_interpreter)],
) -> ExecutionCoordinator:
    """Get the execution coordinator."""
    return ExecutionCoordinator(client, interpreter, timeout=get_settings().source_timeout)


def get_query_set_service(
    query_repository: Annotated[StoredQueryRepository, Depends(get_stored_query_repository)],
    subgraph_repository: Annotated[SubgraphRepository, Depends(get_subgraph_repository)],
    coordinator: Annotated[ExecutionCoordinator, Depends(get_execution_coordinator)],
) -> QuerySetService:
    """Get the query set service."""
    return QuerySetService(
        query_repository=query_repository,
        subgraph_repository=subgraph_repository,
        coordinator=coordinator,
        merge_engine=MergeEngine(),
    )
