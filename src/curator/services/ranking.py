"""Similarity ranker: hybrid semantic + lexical search over the registry."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from curator.clients.embeddings import EmbeddingClient
from curator.observability import get_logger
from curator.observability.constants import LogEvents
from curator.repositories.subgraph import SubgraphRepository
from curator.schemas.sources import RankedSource, SourceDescriptor
from curator.services.schema_cache import SchemaCache

logger = get_logger(__name__)


def cosine_similarities(
    query: Sequence[float], vectors: Sequence[Sequence[float] | None]
) -> np.ndarray:
    """Cosine similarity of ``query`` against every vector in one pass.

    Rows that are missing, have another dimensionality or have zero norm
    score 0.0.
    """
    scores = np.zeros(len(vectors), dtype=np.float64)
    q = np.asarray(query, dtype=np.float64)
    if q.size == 0:
        return scores

    rows = [i for i, v in enumerate(vectors) if v is not None and len(v) == q.size]
    if not rows:
        return scores

    matrix = np.asarray([vectors[i] for i in rows], dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(q)
    dots = matrix @ q
    with np.errstate(divide="ignore", invalid="ignore"):
        scores[rows] = np.where(norms > 0.0, dots / norms, 0.0)
    return scores


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity (1 - cosine distance); 0.0 for mismatched or zero vectors."""
    return float(cosine_similarities(a, [b])[0])


@dataclass(frozen=True)
class RankingWeights:
    """Thresholds and weights of the blended score."""

    similarity_threshold: float = 0.8
    candidate_limit: int = 100
    semantic_weight: float = 0.7
    lexical_weight: float = 0.3
    lexical_match_score: float = 0.8
    top_k: int = 4


class SimilarityRanker:
    """Ranks registered subgraphs against free text.

    Only sources that pass the semantic stage are blended, so a name match
    with no semantic similarity never appears in the results.
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        repository: SubgraphRepository,
        schema_cache: SchemaCache,
        weights: RankingWeights | None = None,
    ):
        self.embedding_client = embedding_client
        self.repository = repository
        self.schema_cache = schema_cache
        self.weights = weights or RankingWeights()

    def semantic_candidates(
        self, query_vector: Sequence[float], sources: Sequence[SourceDescriptor]
    ) -> list[tuple[SourceDescriptor, float]]:
        """Sources above the similarity threshold, best first, capped."""
        if not sources:
            return []
        vectors = [source.embedding_vector or None for source in sources]
        similarities = cosine_similarities(query_vector, vectors)
        has_vector = np.array([v is not None for v in vectors])

        passing = has_vector & (similarities > self.weights.similarity_threshold)
        order = np.argsort(-similarities, kind="stable")
        selected = [i for i in order if passing[i]][: self.weights.candidate_limit]
        return [(sources[i], float(similarities[i])) for i in selected]

    def lexical_scores(
        self, query_text: str, sources: Sequence[SourceDescriptor]
    ) -> dict[str, float]:
        """Name-contains-query scores over the whole registry."""
        needle = query_text.strip().lower()
        if not needle:
            return {}
        return {
            source.id: self.weights.lexical_match_score
            for source in sources
            if needle in source.name.lower()
        }

    def blend(
        self,
        candidates: Sequence[tuple[SourceDescriptor, float]],
        lexical: dict[str, float],
    ) -> list[RankedSource]:
        ranked = []
        for source, semantic in candidates:
            lexical_score = lexical.get(source.id, 0.0)
            ranked.append(
                RankedSource(
                    source=source,
                    semantic_score=semantic,
                    lexical_score=lexical_score,
                    score=semantic * self.weights.semantic_weight
                    + lexical_score * self.weights.lexical_weight,
                )
            )
        ranked.sort(key=lambda r: r.score, reverse=True)
        return ranked[: self.weights.top_k]

    async def _fetch_schemas(self, source_ids: Sequence[str]) -> list[str]:
        """Ensure schemas concurrently; the first failure cancels the rest."""
        tasks = [asyncio.create_task(self.schema_cache.ensure_schema(i)) for i in source_ids]
        try:
            return list(await asyncio.gather(*tasks))
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    async def rank(self, query_text: str) -> list[RankedSource]:
        """Return the top candidates for ``query_text`` with schema text populated.

        Raises:
            ConfigurationError: If the embedding provider is not configured.
            EmbeddingProviderError: If the query cannot be embedded.
            SchemaUnavailableError: If a returned candidate cannot be introspected.
        """
        logger.info(LogEvents.RANKING_STARTED, query=query_text)
        query_vector = await self.embedding_client.embed(query_text)

        sources = self.repository.list_all()
        candidates = self.semantic_candidates(query_vector, sources)
        lexical = self.lexical_scores(query_text, sources)
        ranked = self.blend(candidates, lexical)

        missing = [r for r in ranked if not r.source.schema_text]
        if missing:
            schemas = await self._fetch_schemas([r.source.id for r in missing])
            filled = {r.source.id: text for r, text in zip(missing, schemas)}
            ranked = [
                r.model_copy(
                    update={"source": r.source.model_copy(update={"schema_text": filled[r.source.id]})}
                )
                if r.source.id in filled
                else r
                for r in ranked
            ]

        logger.info(
            LogEvents.RANKING_COMPLETED,
            registry_size=len(sources),
            semantic_candidates=len(candidates),
            lexical_matches=len(lexical),
            returned=[r.source.id for r in ranked],
            schema_fetches=len(missing),
        )
        return ranked
