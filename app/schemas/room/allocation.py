# --- File: app/schemas/room/allocation.py ---
"""
Schemas for room allocation requests and the allocation ledger.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import Field, model_validator

from app.models.base.enums import AllocationStatus, PaymentStatus
from app.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema
from app.schemas.room.room_response import RoomResponse
from app.schemas.student.student_response import StudentResponse

__all__ = [
    "RoomStudentRequest",
    "AllocationCreate",
    "DeallocateRequest",
    "TransferRequest",
    "ReleaseRequest",
    "PaymentStatusUpdate",
    "AllocationResponse",
    "OccupancyResponse",
]


class RoomStudentRequest(BaseSchema):
    """Student id for room-scoped assign and remove."""

    student_id: str = Field(..., min_length=1)


class AllocationCreate(BaseCreateSchema):
    student_id: str = Field(..., min_length=1)
    room_id: str = Field(..., min_length=1)
    bed_number: Optional[int] = Field(default=None, ge=1, le=4, description="Lowest free bed when omitted")
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    start_date: Optional[date] = Field(default=None, description="Defaults to today")


class DeallocateRequest(BaseSchema):
    student_id: str = Field(..., min_length=1)


class TransferRequest(BaseSchema):
    student_id: str = Field(..., min_length=1)
    from_room_id: str = Field(..., min_length=1)
    to_room_id: str = Field(..., min_length=1)
    bed_number: Optional[int] = Field(default=None, ge=1, le=4)


class ReleaseRequest(BaseSchema):
    status: AllocationStatus = Field(default=AllocationStatus.COMPLETED)
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def closing_status(self) -> "ReleaseRequest":
        if self.status == AllocationStatus.ACTIVE:
            raise ValueError("status must be Completed or Cancelled")
        return self


class PaymentStatusUpdate(BaseSchema):
    payment_status: PaymentStatus


class AllocationResponse(BaseResponseSchema):
    """Ledger entry."""

    student_id: str
    room_id: str
    bed_number: int
    start_date: date
    end_date: Optional[date] = None
    status: AllocationStatus
    payment_status: PaymentStatus
    allocated_by: Optional[str] = None


class OccupancyResponse(BaseSchema):
    """State of the student and rooms after an occupancy change."""

    student: Optional[StudentResponse] = None
    room: Optional[RoomResponse] = None
    previous_room: Optional[RoomResponse] = None
    allocation: Optional[AllocationResponse] = None

    @classmethod
    def from_result(cls, result, allocation=None) -> "OccupancyResponse":
        """Build from an ``OccupancyResult`` of the occupancy coordinator."""
        return cls(
            student=StudentResponse.model_validate(result.student) if result.student is not None else None,
            room=RoomResponse.model_validate(result.room) if result.room is not None else None,
            previous_room=(
                RoomResponse.model_validate(result.previous_room) if result.previous_room is not None else None
            ),
            allocation=AllocationResponse.model_validate(allocation) if allocation is not None else None,
        )
