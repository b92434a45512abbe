"""
Base service class providing common functionality for all services.
"""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.repositories.base.base_repository import BaseRepository
from app.services.base.transaction_manager import TransactionManager

TModel = TypeVar("TModel")
TRepo = TypeVar("TRepo", bound=BaseRepository)


class BaseService(Generic[TModel, TRepo]):
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Transaction management through ``TransactionManager``

    Failures are raised as ``BaseAppException`` subclasses and rendered by
    the API exception handlers.
    """

    def __init__(self, repository: TRepo, db_session: Session):
        """
        Initialize base service.

        Args:
            repository: Repository instance for data access
            db_session: SQLAlchemy database session
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self.transactions = TransactionManager(db_session)
        self._logger = get_logger(f"app.services.{self.__class__.__name__}")

    def get_by_id(self, entity_id: str) -> TModel:
        """
        Retrieve entity by ID.

        Raises:
            ResourceNotFoundError: (repository specific subclass) if missing
        """
        return self.repository.get_by_id(entity_id)


__all__ = ["BaseService", "TModel", "TRepo"]
