# app/services/student/student_service.py
"""
Student registry.

Student profiles are created together with their login account. Room
membership is read-only here; deleting a student takes them out of their
room through the occupancy coordinator first.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateEntryError, StudentNotFoundError
from app.core.locking import student_key
from app.core.security import hash_password
from app.models.base.enums import AllocationStatus, UserRole
from app.models.room.room import Room
from app.models.student.student import Student
from app.models.user.user import User
from app.repositories.student.student_repository import StudentRepository
from app.repositories.user.user_repository import UserRepository
from app.schemas.student.student_base import StudentCreate, StudentUpdate
from app.services.base.base_service import BaseService
from app.utils.string_utils import NameFormatter
from app.services.room.occupancy_service import OccupancyService


@dataclass
class StudentRoomView:
    student: Student
    room: Optional[Room]
    roommates: List[Student] = field(default_factory=list)


class StudentService(BaseService[Student, StudentRepository]):
    """
    Student profile management.
    """

    def __init__(self, db_session: Session, occupancy: Optional[OccupancyService] = None):
        super().__init__(StudentRepository(db_session), db_session)
        self.students = self.repository
        self.users = UserRepository(db_session)
        self.occupancy = occupancy or OccupancyService(db_session)

    def create(self, data: StudentCreate, created_by: Optional[str] = None) -> Student:
        """
        Provision a student account with a unique ``STD####`` code and the
        profile, in one transaction.

        Raises:
            DuplicateEntryError: email already registered
        """
        with self.transactions.start("create_student"):
            if self.users.email_exists(data.email) or self.students.find_by_email(data.email):
                raise DuplicateEntryError("Student with this email already exists", field="email")

            code = self.users.generate_unique_code("STD", "student_code")
            first_name, last_name = NameFormatter.split_name(data.name)
            user = self.users.create(
                User(
                    email=data.email,
                    first_name=first_name,
                    last_name=last_name,
                    phone=data.phone,
                    password_hash=hash_password(data.password),
                    role=UserRole.STUDENT,
                    student_code=code,
                    created_by=created_by,
                )
            )
            student = self.students.create(
                Student(
                    user_id=user.id,
                    name=data.name,
                    email=data.email,
                    phone=data.phone,
                    course=data.course,
                    year=data.year,
                    address=data.address,
                    student_code=code,
                )
            )

        self._logger.info("Student created", extra={"student_id": student.id, "student_code": code})
        return student

    def list(self, room_id: Optional[str] = None, unassigned_only: bool = False) -> List[Student]:
        return self.students.list_students(room_id=room_id, unassigned_only=unassigned_only)

    def get(self, student_id: str) -> Student:
        return self.students.get_by_id(student_id)

    def get_by_user(self, user_id: str) -> Student:
        student = self.students.find_by_user_id(user_id)
        if student is None:
            raise StudentNotFoundError()
        return student

    def get_with_room(self, student_id: str) -> StudentRoomView:
        student = self.students.get_by_id(student_id)
        return StudentRoomView(
            student=student,
            room=student.room,
            roommates=self.students.roommates_of(student),
        )

    def update(self, student_id: str, data: StudentUpdate) -> Student:
        """
        Edit profile fields. The email change is mirrored on the account.

        Raises:
            DuplicateEntryError: new email already registered
        """
        changes = data.model_dump(exclude_unset=True)

        def work() -> Student:
            student = self.occupancy.load_student(student_id)
            new_email = changes.get("email")
            if new_email and new_email != student.email:
                owner = self.users.find_by_email(new_email)
                if owner is not None and owner.id != student.user_id:
                    raise DuplicateEntryError("Email already in use", field="email")
                student.user.email = new_email
            if changes.get("name"):
                student.user.first_name, student.user.last_name = NameFormatter.split_name(changes["name"])
            if "phone" in changes:
                student.user.phone = changes["phone"]
            self.students.update(student, changes)
            return student

        return self.occupancy.execute("update_student", lambda: [student_key(student_id)], work)

    def delete(self, student_id: str) -> None:
        """Take the student out of any room, then delete profile and account."""
        def work() -> None:
            student = self.occupancy.load_student(student_id)
            if student.room_id is not None:
                room = self.occupancy.load_room(student.room_id)
                self.occupancy.apply_remove(student, room, close_as=AllocationStatus.CANCELLED)
            user = student.user
            self.students.delete(student)
            if user is not None:
                self.users.delete(user)

        self.occupancy.execute("delete_student", self.occupancy.student_lock_keys(student_id), work)
        self._logger.info("Student deleted", extra={"student_id": student_id})
