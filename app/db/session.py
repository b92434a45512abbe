"""Database session management."""
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config.settings import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine with pool options suited to the backend."""
    kwargs: Dict[str, Any] = {"pool_pre_ping": True, "echo": echo}

    if database_url.startswith("sqlite"):
        # Requests run on a thread pool; SQLite connections must be shareable
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_POOL_OVERFLOW

    return create_engine(database_url, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, bind=bind)


engine = build_engine(settings.get_database_url(), echo=settings.DB_ECHO)

SessionLocal = build_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    Usage in FastAPI endpoints:
        @router.get("/items/")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
