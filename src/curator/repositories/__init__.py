"""Repository layer for data access."""

from curator.repositories.base import BaseRepository
from curator.repositories.stored_query import StoredQueryRepository
from curator.repositories.subgraph import SubgraphRepository

__all__ = [
    "BaseRepository",
    "StoredQueryRepository",
    "SubgraphRepository",
]
