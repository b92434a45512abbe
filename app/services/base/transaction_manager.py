"""
Transaction manager utilities for service layer operations.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from app.core.exceptions import OperationTimeoutError
from app.core.logging import get_logger


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TransactionContext:
    """Context information for a transaction."""

    operation: Optional[str] = None
    transaction_id: str = field(default_factory=lambda: str(uuid4()))
    started_at: datetime = field(default_factory=_utcnow)
    committed: bool = False
    rolled_back: bool = False
    completed_at: Optional[datetime] = None
    error: Optional[BaseException] = None

    @property
    def duration_ms(self) -> Optional[float]:
        """Get transaction duration in milliseconds."""
        if self.completed_at:
            delta = self.completed_at - self.started_at
            return delta.total_seconds() * 1000
        return None

    @property
    def is_completed(self) -> bool:
        return self.committed or self.rolled_back


class TransactionManager:
    """
    Unit-of-work boundary for service operations.

    Commits when the block exits normally and rolls back on any exception.
    An optional monotonic ``deadline`` is checked right before commit: past
    it, the work is rolled back and ``OperationTimeoutError`` is raised, so a
    slow operation never lands half-applied.
    """

    def __init__(self, db_session: Session):
        self.db = db_session
        self._logger = get_logger(self.__class__.__name__)

    @contextmanager
    def start(
        self,
        operation: Optional[str] = None,
        deadline: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ) -> Iterator[TransactionContext]:
        """
        Start a new transaction.

        Args:
            operation: Name used in log lines and timeout errors
            deadline: ``time.monotonic()`` value after which commit is refused
            timeout_seconds: Configured budget, reported in the timeout error

        Example:
            with transaction_manager.start("create_room") as ctx:
                # perform operations
                # automatic commit on success, rollback on exception
        """
        ctx = TransactionContext(operation=operation)

        try:
            yield ctx

            if deadline is not None and time.monotonic() >= deadline:
                raise OperationTimeoutError(
                    f"Operation '{operation}' exceeded its deadline and was rolled back",
                    timeout_seconds=timeout_seconds,
                    operation=operation,
                )

            self.db.commit()
            ctx.committed = True

        except BaseException as exc:
            self._rollback(ctx, exc)
            raise

        finally:
            ctx.completed_at = _utcnow()
            self._logger.debug(
                f"Transaction completed: {ctx.transaction_id} "
                f"({'committed' if ctx.committed else 'rolled back'})",
                extra={
                    "transaction_id": ctx.transaction_id,
                    "operation": operation,
                    "committed": ctx.committed,
                    "duration_ms": ctx.duration_ms,
                },
            )

    def _rollback(self, ctx: TransactionContext, exc: BaseException) -> None:
        self.db.rollback()
        ctx.rolled_back = True
        ctx.error = exc

        self._logger.debug(
            f"Transaction rolled back: {ctx.transaction_id}",
            extra={
                "transaction_id": ctx.transaction_id,
                "operation": ctx.operation,
                "error": type(exc).__name__,
            },
        )


__all__ = ["TransactionContext", "TransactionManager"]
