"""
Bed-level allocation ledger entry.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import BaseModel
from app.models.base.enums import AllocationStatus, PaymentStatus
from app.models.base.mixins import TimestampMixin
from app.models.base.types import enum_type

if TYPE_CHECKING:
    from app.models.student.student import Student
    from app.models.room.room import Room

_ACTIVE = text("status = 'Active'")


class Allocation(BaseModel, TimestampMixin):
    """
    History record of a student holding a bed in a room.

    An entry never changes occupancy itself; it is written alongside the
    coordinator's assign/remove in the same transaction.
    """

    __tablename__ = "allocations"
    __table_args__ = (
        CheckConstraint("bed_number >= 1", name="ck_allocation_bed_positive"),
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date",
            name="ck_allocation_dates_ordered",
        ),
        # One Active allocation per bed and per student
        Index(
            "uq_allocation_active_bed",
            "room_id",
            "bed_number",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
        Index(
            "uq_allocation_active_student",
            "student_id",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    bed_number: Mapped[int] = mapped_column(Integer, nullable=False)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[AllocationStatus] = mapped_column(
        enum_type(AllocationStatus, length=20),
        nullable=False,
        default=AllocationStatus.ACTIVE,
        index=True,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        enum_type(PaymentStatus, length=20),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    allocated_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="Account that recorded the allocation",
    )

    student: Mapped["Student"] = relationship("Student", back_populates="allocations")
    room: Mapped["Room"] = relationship("Room", back_populates="allocations")

    @property
    def is_active(self) -> bool:
        return self.status == AllocationStatus.ACTIVE

    def __repr__(self) -> str:
        return (
            f"<Allocation(id={self.id}, room_id={self.room_id}, "
            f"bed={self.bed_number}, status={self.status})>"
        )


__all__ = ["Allocation"]
