# app/services/room/__init__.py
"""
Room services: the occupancy coordinator, the room registry and the
allocation ledger.
"""

from app.services.room.occupancy_service import OccupancyResult, OccupancyService
from app.services.room.room_service import RoomService
from app.services.room.allocation_service import AllocationService

__all__ = ["OccupancyService", "OccupancyResult", "RoomService", "AllocationService"]
