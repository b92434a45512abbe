"""
Student core model.

A student profile belongs to exactly one account of role student and points
at no more than one room. ``room_id`` is written only by the occupancy
coordinator; profile edits never touch it.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import BaseModel
from app.models.base.mixins import TimestampMixin

if TYPE_CHECKING:
    from app.models.user.user import User
    from app.models.room.room import Room
    from app.models.room.allocation import Allocation


class Student(BaseModel, TimestampMixin):
    """
    Core student model.

    Relationships:
        - Links to User for authentication
        - Links to Room for the current residence (nullable)
        - Has Allocations for bed-level history
    """

    __tablename__ = "students"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    course: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Year of study (1-6)")
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    student_code: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        comment="STD#### code shared with the owning account",
    )

    room_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Current room; maintained by the occupancy coordinator",
    )

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Optimistic lock counter",
    )

    __mapper_args__ = {"version_id_col": version}

    user: Mapped["User"] = relationship("User", back_populates="student_profile")
    room: Mapped[Optional["Room"]] = relationship("Room", back_populates="occupants")
    allocations: Mapped[List["Allocation"]] = relationship(
        "Allocation",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="Allocation.created_at",
    )

    @property
    def is_assigned(self) -> bool:
        return self.room_id is not None

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, code={self.student_code}, room_id={self.room_id})>"


__all__ = ["Student"]
