# --- File: app/schemas/room/room_response.py ---
"""
Room response schemas.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from app.models.base.enums import Block, Facility, Floor, PricePeriod, RoomStatus, RoomType
from app.schemas.common.base import BaseResponseSchema, BaseSchema
from app.schemas.student.student_response import StudentResponse

__all__ = [
    "OccupantSummary",
    "RoomResponse",
    "BlockSummary",
    "StudentRoomResponse",
]


class OccupantSummary(BaseSchema):
    """Student as listed inside a room."""

    id: str
    name: str
    email: str
    student_code: str
    course: Optional[str] = None
    year: Optional[int] = None


class RoomResponse(BaseResponseSchema):
    """Room with its current occupants."""

    block: Block
    room_number: str
    room_code: str
    floor: Optional[Floor] = None
    capacity: int
    occupied_count: int
    available_beds: int
    status: RoomStatus
    is_under_maintenance: bool
    last_maintenance: Optional[datetime] = None
    room_type: RoomType
    facilities: List[Facility] = Field(default_factory=list)
    description: str
    price: Optional[Decimal] = None
    price_period: PricePeriod
    image_url: Optional[str] = None
    occupants: List[OccupantSummary] = Field(default_factory=list)


class BlockSummary(BaseSchema):
    """Occupancy statistics of one block."""

    block: Block
    total_rooms: int
    full_rooms: int
    maintenance_rooms: int
    vacant_rooms: int
    total_beds: int
    occupied_beds: int
    occupancy_percentage: float


class StudentRoomResponse(BaseSchema):
    """A student together with their room and roommates."""

    student: StudentResponse
    room: Optional[RoomResponse] = None
    roommates: List[OccupantSummary] = Field(default_factory=list)
