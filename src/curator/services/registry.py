"""Source registry service: bulk import, updates and embedding refresh."""

from collections.abc import Sequence

from curator.clients.embeddings import EmbeddingClient
from curator.domain.exceptions import CuratorError, SourceNotFoundError
from curator.observability import get_logger
from curator.observability.constants import LogEvents
from curator.repositories.subgraph import SubgraphRepository
from curator.schemas.sources import SourceCreate, SourceDescriptor, SourceUpdate

logger = get_logger(__name__)


def embedding_text(source: SourceDescriptor) -> str:
    """Text that represents a subgraph for semantic search."""
    return " ".join(part for part in (source.name, source.protocol, source.chain) if part)


class SourceRegistryService:
    """Business logic over the subgraph registry."""

    def __init__(self, repository: SubgraphRepository, embedding_client: EmbeddingClient):
        self.repository = repository
        self.embedding_client = embedding_client

    def list_sources(self, skip: int = 0, limit: int | None = None) -> list[SourceDescriptor]:
        return self.repository.list_all(skip=skip, limit=limit)

    def get_source(self, source_id: str) -> SourceDescriptor:
        source = self.repository.get_by_id(source_id)
        if source is None:
            raise SourceNotFoundError(source_id)
        return source

    def import_sources(self, sources: Sequence[SourceCreate]) -> list[SourceDescriptor]:
        """Upsert registry entries by id. Re-importing the same entry is a no-op."""
        imported = []
        for source in sources:
            descriptor = self.repository.upsert(source)
            if descriptor is None:
                raise CuratorError(f"Failed to import subgraph '{source.id}'", "IMPORT_FAILED")
            imported.append(descriptor)
        logger.info(LogEvents.REGISTRY_IMPORTED, count=len(imported))
        return imported

    def update_source(self, source_id: str, update: SourceUpdate) -> SourceDescriptor:
        fields = update.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            return self.get_source(source_id)
        descriptor = self.repository.update(source_id, **fields)
        if descriptor is None:
            raise SourceNotFoundError(source_id)
        return descriptor

    def delete_source(self, source_id: str) -> None:
        if not self.repository.delete(source_id):
            raise SourceNotFoundError(source_id)

    async def refresh_embedding(self, source_id: str) -> SourceDescriptor:
        """Recompute and store the embedding of one subgraph."""
        source = self.get_source(source_id)
        vector = await self.embedding_client.embed(embedding_text(source))
        descriptor = self.repository.set_embedding(source_id, vector)
        if descriptor is None:
            raise CuratorError(
                f"Failed to store embedding for subgraph '{source_id}'", "EMBEDDING_STORE_FAILED"
            )
        logger.info(
            LogEvents.REGISTRY_EMBEDDING_REFRESHED, source_id=source_id, dimensions=len(vector)
        )
        return descriptor
