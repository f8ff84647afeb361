"""Base repository with common CRUD operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from curator.database.models import Base
from curator.observability import get_logger

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

T = TypeVar("T", bound=Base)

logger = get_logger(__name__)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations on string-keyed models."""

    def __init__(self, session: Session, model: type[T]):
        """Initialize repository with database session and model class."""
        self.session = session
        self.model = model

    def _get(self, id: str) -> T | None:
        try:
            return self.session.get(self.model, id)
        except SQLAlchemyError:
            return None

    def _list(self, skip: int = 0, limit: int | None = None) -> list[T]:
        try:
            query = select(self.model).order_by(self.model.id).offset(skip)  # type: ignore[attr-defined]
            if limit is not None:
                query = query.limit(limit)
            return list(self.session.execute(query).scalars().all())
        except SQLAlchemyError:
            return []

    def _create(self, **kwargs: Any) -> T | None:
        try:
            obj = self.model(**kwargs)
            self.session.add(obj)
            self.session.commit()
            self.session.refresh(obj)
            return obj
        except SQLAlchemyError as e:
            logger.error("repository.create.failed", model=self.model.__name__, error=str(e))
            self.session.rollback()
            return None

    def _merge(self, obj: T) -> T | None:
        """Insert or update by primary key (idempotent upsert)."""
        try:
            merged = self.session.merge(obj)
            self.session.commit()
            return merged
        except SQLAlchemyError as e:
            logger.error("repository.merge.failed", model=self.model.__name__, error=str(e))
            self.session.rollback()
            return None

    def _update(self, id: str, **kwargs: Any) -> T | None:
        try:
            obj = self._get(id)
            if not obj:
                return None

            for field, value in kwargs.items():
                if hasattr(obj, field):
                    setattr(obj, field, value)

            self.session.commit()
            self.session.refresh(obj)
            return obj
        except SQLAlchemyError as e:
            logger.error("repository.update.failed", model=self.model.__name__, error=str(e))
            self.session.rollback()
            return None

    def delete(self, id: str) -> bool:
        """Delete a record by ID."""
        try:
            obj = self._get(id)
            if not obj:
                return False

            self.session.delete(obj)
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error("repository.delete.failed", model=self.model.__name__, error=str(e))
            self.session.rollback()
            return False

    def count(self) -> int:
        """Count records."""
        try:
            return int(self.session.scalar(select(func.count()).select_from(self.model)) or 0)
        except SQLAlchemyError:
            return 0
