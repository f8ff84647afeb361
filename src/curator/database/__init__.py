"""Database package - models, engine and session management."""

from curator.database.models import Base, StoredQueryModel, SubgraphModel

__all__ = ["Base", "StoredQueryModel", "SubgraphModel"]
