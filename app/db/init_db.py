# app/db/init_db.py
"""Database initialization utilities."""
from typing import Optional

from sqlalchemy.engine import Engine

from app.core.logging import get_logger
from app.db.base import Base, import_models
from app.db.session import engine as default_engine

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all tables that do not exist yet.

    Note: This is suitable for development/testing only.
    For production, use migrations instead.
    """
    import_models()
    Base.metadata.create_all(bind=bind or default_engine)
    logger.info("Database tables ensured", extra={"tables": len(Base.metadata.tables)})


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Only for development/testing purposes.
    """
    Base.metadata.drop_all(bind=bind or default_engine)
    logger.warning("All database tables dropped")
