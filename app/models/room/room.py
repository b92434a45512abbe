# app/models/room/room.py
"""
Room model and the occupancy status rule.

``occupants`` is the set of students whose ``room_id`` points at the room, so
membership and the student's room reference are a single relation.
``occupied_count`` and ``status`` are stored for querying but are written only
by the occupancy coordinator, which sets them from ``occupants`` and
``derive_status``.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import BaseModel
from app.models.base.enums import Block, Floor, PricePeriod, RoomStatus, RoomType
from app.models.base.mixins import TimestampMixin
from app.models.base.types import enum_type

if TYPE_CHECKING:
    from app.models.student.student import Student
    from app.models.room.allocation import Allocation


def derive_status(capacity: int, occupied_count: int, is_under_maintenance: bool) -> RoomStatus:
    """
    The one rule mapping occupancy onto a room status.

    Maintenance wins over everything; otherwise a room is Full once its
    occupancy reaches capacity and Available below that.
    """
    if is_under_maintenance:
        return RoomStatus.MAINTENANCE
    if occupied_count >= capacity:
        return RoomStatus.FULL
    return RoomStatus.AVAILABLE


class Room(BaseModel, TimestampMixin):
    """
    Physical room within a hostel block.
    """

    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("block", "room_number", name="uq_room_block_number"),
        CheckConstraint("capacity >= 1 AND capacity <= 4", name="ck_room_capacity_range"),
        CheckConstraint("occupied_count >= 0", name="ck_room_occupied_non_negative"),
        Index("ix_room_block_status", "block", "status"),
    )

    block: Mapped[Block] = mapped_column(enum_type(Block, length=1), nullable=False, index=True)
    room_number: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="Block-prefixed number, e.g. A-101",
    )
    room_code: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        comment="RM-<room_number>",
    )
    floor: Mapped[Optional[Floor]] = mapped_column(enum_type(Floor, length=20), nullable=True)

    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    occupied_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[RoomStatus] = mapped_column(
        enum_type(RoomStatus, length=20),
        nullable=False,
        default=RoomStatus.AVAILABLE,
        index=True,
    )
    is_under_maintenance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_maintenance: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    room_type: Mapped[RoomType] = mapped_column(enum_type(RoomType), nullable=False, index=True)
    facilities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    price_period: Mapped[PricePeriod] = mapped_column(
        enum_type(PricePeriod, length=20),
        nullable=False,
        default=PricePeriod.MONTH,
    )
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Optimistic lock counter",
    )

    __mapper_args__ = {"version_id_col": version}

    occupants: Mapped[List["Student"]] = relationship(
        "Student",
        back_populates="room",
        order_by="Student.name",
    )
    allocations: Mapped[List["Allocation"]] = relationship(
        "Allocation",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="Allocation.created_at",
    )

    @property
    def available_beds(self) -> int:
        return max(0, self.capacity - self.occupied_count)

    def __repr__(self) -> str:
        return (
            f"<Room(id={self.id}, number={self.room_number}, "
            f"occupied={self.occupied_count}/{self.capacity}, status={self.status})>"
        )


__all__ = ["Room", "derive_status"]
