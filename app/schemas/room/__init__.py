# --- File: app/schemas/room/__init__.py ---
"""
Room schemas package.
"""

from app.schemas.room.room_base import RoomBase, RoomCreate, RoomUpdate
from app.schemas.room.room_response import (
    BlockSummary,
    OccupantSummary,
    RoomResponse,
    StudentRoomResponse,
)
from app.schemas.room.allocation import (
    AllocationCreate,
    AllocationResponse,
    DeallocateRequest,
    OccupancyResponse,
    PaymentStatusUpdate,
    ReleaseRequest,
    RoomStudentRequest,
    TransferRequest,
)

__all__ = [
    "RoomBase",
    "RoomCreate",
    "RoomUpdate",
    "RoomResponse",
    "OccupantSummary",
    "BlockSummary",
    "StudentRoomResponse",
    "AllocationCreate",
    "AllocationResponse",
    "DeallocateRequest",
    "OccupancyResponse",
    "PaymentStatusUpdate",
    "ReleaseRequest",
    "RoomStudentRequest",
    "TransferRequest",
]
