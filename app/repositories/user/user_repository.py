"""
User repository for account lookups and code generation.
"""

import secrets
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, UserNotFoundError
from app.models.user.user import User
from app.repositories.base.base_repository import BaseRepository

# Attempts at drawing an unused random code before giving up
CODE_GENERATION_ATTEMPTS = 25


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    not_found_error = UserNotFoundError

    def __init__(self, db: Session):
        super().__init__(User, db)

    def find_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        return self.db.execute(stmt).scalars().first()

    def email_exists(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def generate_unique_code(self, prefix: str, column: str) -> str:
        """
        Draw a random ``<prefix>####`` code not yet used in ``column``.

        Args:
            prefix: Code prefix such as ``STD`` or ``WARD``
            column: Name of the User column holding the code

        Raises:
            ConflictError: If no free code was found
        """
        attribute = getattr(User, column)
        for _ in range(CODE_GENERATION_ATTEMPTS):
            code = f"{prefix}{secrets.randbelow(9000) + 1000}"
            taken = self.db.execute(select(User.id).where(attribute == code)).first()
            if taken is None:
                return code
        raise ConflictError(f"Could not generate a unique {prefix} code")


__all__ = ["UserRepository"]
