"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base shared by every table and the abstract
``BaseModel`` carrying the UUID primary key.
"""

import re
from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, declarative_base, declared_attr, mapped_column

# Single declarative base for the whole application
Base = declarative_base()


class BaseModel(Base):
    """
    Abstract base model with common fields and methods.

    Concrete models normally set ``__tablename__`` explicitly; the generated
    name is a snake_case plural of the class name.
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        nullable=False,
        comment="Primary key (UUID)",
    )

    @declared_attr.directive
    def __tablename__(cls) -> str:
        name = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', cls.__name__)
        return re.sub('([a-z0-9])([A-Z])', r'\1_\2', name).lower() + 's'

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


__all__ = ["Base", "BaseModel"]
