"""
User model configuration.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import BaseModel
from app.models.base.enums import UserRole
from app.models.base.mixins import TimestampMixin
from app.models.base.types import enum_type

if TYPE_CHECKING:
    from app.models.student.student import Student
    from app.models.warden.warden import Warden


class User(BaseModel, TimestampMixin):
    """
    Core User entity.

    Holds authentication credentials and the role used for access control.
    Students and wardens hang their profiles off this record.
    """

    __tablename__ = "users"
    __table_args__ = (
        {"comment": "User authentication and identity"},
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique email address (normalized to lowercase)",
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )

    role: Mapped[UserRole] = mapped_column(
        enum_type(UserRole),
        nullable=False,
        default=UserRole.STUDENT,
        index=True,
        comment="Primary user role for RBAC",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="Account active status (can login)",
    )

    student_code: Mapped[Optional[str]] = mapped_column(
        String(20),
        unique=True,
        nullable=True,
        comment="Generated STD#### code for student accounts",
    )
    staff_code: Mapped[Optional[str]] = mapped_column(
        String(20),
        unique=True,
        nullable=True,
        comment="Generated WARD#### / STAF#### code for staff accounts",
    )

    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Last successful login timestamp",
    )
    created_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="Account that provisioned this user",
    )

    student_profile: Mapped[Optional["Student"]] = relationship(
        "Student",
        back_populates="user",
        uselist=False,
    )
    warden_profile: Mapped[Optional["Warden"]] = relationship(
        "Warden",
        back_populates="user",
        uselist=False,
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


__all__ = ["User"]
