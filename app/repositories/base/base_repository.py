"""
Base repository with standardized CRUD operations and transaction management.

Provides the foundation for all domain repositories. Repositories flush but
leave commits to the caller by default so that several writes can share one
transaction.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    BaseAppException,
    DuplicateEntryError,
    ResourceNotFoundError,
    ValidationError,
)
from app.core.logging import get_logger
from app.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)

_UNIQUE_MARKERS = ("unique constraint", "duplicate key", "duplicate entry")


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the driver reports a unique or primary key collision."""
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    message = str(error.orig).lower()
    return any(marker in message for marker in _UNIQUE_MARKERS)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository over one model class.

    Subclasses set ``not_found_error`` to the exception raised by
    ``get_by_id`` when a row is missing.
    """

    not_found_error: Type[ResourceNotFoundError] = ResourceNotFoundError

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Transaction Management ====================

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Transaction context manager with automatic rollback.

        Usage:
            with repository.transaction():
                repository.create(entity)
                repository.update(entity, data)
        """
        try:
            yield self.db
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning(
                "Transaction rolled back",
                extra={"model": self.model.__name__, "error": type(e).__name__},
            )
            raise

    def _integrity_error(self, error: IntegrityError) -> BaseAppException:
        if is_unique_violation(error):
            return DuplicateEntryError(f"{self.model.__name__} already exists")
        logger.warning(
            "Constraint violation",
            extra={"model": self.model.__name__, "error": str(error.orig)},
        )
        return ValidationError(f"{self.model.__name__} violates a database constraint")

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def flush(self) -> None:
        """
        Flush pending changes.

        Raises:
            DuplicateEntryError: If a unique constraint rejects the flush
            ValidationError: If any other constraint rejects it
        """
        try:
            self.db.flush()
        except IntegrityError as e:
            raise self._integrity_error(e) from e

    # ==================== Create Operations ====================

    def create(self, entity: ModelType, commit: bool = False) -> ModelType:
        """
        Add a new entity to the session.

        Args:
            entity: Entity to create
            commit: Whether to commit immediately

        Returns:
            Created entity
        """
        self.db.add(entity)
        if commit:
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise self._integrity_error(e) from e
            self.db.refresh(entity)
        else:
            self.flush()

        logger.debug(f"Created {self.model.__name__}", extra={"entity_id": entity.id})
        return entity

    # ==================== Read Operations ====================

    def find_by_id(self, id: str, for_update: bool = False) -> Optional[ModelType]:
        """
        Find entity by ID.

        Args:
            id: Entity ID
            for_update: Lock the row for the rest of the transaction
                (``SELECT ... FOR UPDATE`` where the backend supports it)

        Returns:
            Entity or None
        """
        stmt = select(self.model).where(self.model.id == id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().first()

    def get_by_id(self, id: str, for_update: bool = False) -> ModelType:
        entity = self.find_by_id(id, for_update=for_update)
        if entity is None:
            raise self.not_found_error(id)
        return entity

    def find_one_by_criteria(self, criteria: Dict[str, Any]) -> Optional[ModelType]:
        stmt = select(self.model)
        for field, value in criteria.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        return self.db.execute(stmt.limit(1)).scalars().first()

    # ==================== Update / Delete ====================

    def update(self, entity: ModelType, data: Dict[str, Any], commit: bool = False) -> ModelType:
        """
        Apply ``data`` to an entity.

        Unknown keys are ignored.
        """
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)

        if commit:
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise self._integrity_error(e) from e
            self.db.refresh(entity)
        else:
            self.flush()
        return entity

    def delete(self, entity: ModelType, commit: bool = False) -> None:
        self.db.delete(entity)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        logger.debug(f"Deleted {self.model.__name__}", extra={"entity_id": entity.id})


__all__ = ["BaseRepository", "ModelType"]
