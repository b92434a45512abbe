"""
Warden repository.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import WardenNotFoundError
from app.models.warden.warden import Warden
from app.repositories.base.base_repository import BaseRepository


class WardenRepository(BaseRepository[Warden]):
    not_found_error = WardenNotFoundError

    def __init__(self, db: Session):
        super().__init__(Warden, db)

    def find_by_user_id(self, user_id: str) -> Optional[Warden]:
        return self.find_one_by_criteria({"user_id": user_id})

    def list_wardens(self) -> List[Warden]:
        return list(self.db.execute(select(Warden).order_by(Warden.name)).scalars())


__all__ = ["WardenRepository"]
