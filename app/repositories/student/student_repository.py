"""
Student repository.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import StudentNotFoundError
from app.models.student.student import Student
from app.repositories.base.base_repository import BaseRepository


class StudentRepository(BaseRepository[Student]):
    """Repository for Student entity."""

    not_found_error = StudentNotFoundError

    def __init__(self, db: Session):
        super().__init__(Student, db)

    def find_by_user_id(self, user_id: str) -> Optional[Student]:
        return self.find_one_by_criteria({"user_id": user_id})

    def find_by_email(self, email: str) -> Optional[Student]:
        stmt = select(Student).where(func.lower(Student.email) == email.strip().lower())
        return self.db.execute(stmt).scalars().first()

    def list_students(
        self,
        room_id: Optional[str] = None,
        unassigned_only: bool = False,
    ) -> List[Student]:
        """
        List students ordered by name with their room eagerly loaded.

        Args:
            room_id: Only students in this room
            unassigned_only: Only students without a room
        """
        stmt = select(Student).options(selectinload(Student.room)).order_by(Student.name)
        if room_id is not None:
            stmt = stmt.where(Student.room_id == room_id)
        if unassigned_only:
            stmt = stmt.where(Student.room_id.is_(None))
        return list(self.db.execute(stmt).scalars())

    def roommates_of(self, student: Student) -> List[Student]:
        if student.room_id is None:
            return []
        stmt = (
            select(Student)
            .where(Student.room_id == student.room_id, Student.id != student.id)
            .order_by(Student.name)
        )
        return list(self.db.execute(stmt).scalars())

    def ids_in_room(self, room_id: str) -> List[str]:
        stmt = select(Student.id).where(Student.room_id == room_id).order_by(Student.id)
        return list(self.db.execute(stmt).scalars())



__all__ = ["StudentRepository"]
