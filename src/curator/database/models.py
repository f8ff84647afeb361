"""SQLAlchemy database models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class SubgraphModel(Base):
    """Registered subgraph (source registry entry)."""

    __tablename__ = "subgraphs"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    protocol: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    chain: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    queries_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stake_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float] | None] = mapped_column(JSON, nullable=True)
    schema_text: Mapped[str | None] = mapped_column("schema", Text, nullable=True)
    entities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index("idx_subgraphs_name", "name"),
        Index("idx_subgraphs_protocol", "protocol"),
    )


class StoredQueryModel(Base):
    """Stored query set: per-source specs and requirements as JSON blobs."""

    __tablename__ = "stored_queries"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    path: Mapped[str | None] = mapped_column(Text, nullable=True)
    subgraph_queries: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    requirements: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
