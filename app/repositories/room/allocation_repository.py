# app/repositories/room/allocation_repository.py
"""
Allocation ledger repository.
"""

from typing import List, Optional, Set

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import AllocationNotFoundError
from app.models.base.enums import AllocationStatus
from app.models.room.allocation import Allocation
from app.repositories.base.base_repository import BaseRepository


class AllocationRepository(BaseRepository[Allocation]):
    """Repository for Allocation entries."""

    not_found_error = AllocationNotFoundError

    def __init__(self, db: Session):
        super().__init__(Allocation, db)

    def find_active_for_student(self, student_id: str, room_id: Optional[str] = None) -> List[Allocation]:
        stmt = select(Allocation).where(
            Allocation.student_id == student_id,
            Allocation.status == AllocationStatus.ACTIVE,
        )
        if room_id is not None:
            stmt = stmt.where(Allocation.room_id == room_id)
        return list(self.db.execute(stmt).scalars())

    def occupied_beds(self, room_id: str) -> Set[int]:
        stmt = select(Allocation.bed_number).where(
            Allocation.room_id == room_id,
            Allocation.status == AllocationStatus.ACTIVE,
        )
        return set(self.db.execute(stmt).scalars())

    def list_allocations(
        self,
        student_id: Optional[str] = None,
        room_id: Optional[str] = None,
        active_only: bool = False,
    ) -> List[Allocation]:
        """History entries, newest first."""
        stmt = select(Allocation)
        if student_id is not None:
            stmt = stmt.where(Allocation.student_id == student_id)
        if room_id is not None:
            stmt = stmt.where(Allocation.room_id == room_id)
        if active_only:
            stmt = stmt.where(Allocation.status == AllocationStatus.ACTIVE)
        stmt = stmt.order_by(Allocation.created_at.desc(), Allocation.id)
        return list(self.db.execute(stmt).scalars())


__all__ = ["AllocationRepository"]
