"""Clients package - HTTP clients for external services."""

from curator.clients.embeddings import EmbeddingClient
from curator.clients.subgraph import SubgraphClient, extract_root_items

__all__ = [
    "EmbeddingClient",
    "SubgraphClient",
    "extract_root_items",
]
