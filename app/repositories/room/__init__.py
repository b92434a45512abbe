# app/repositories/room/__init__.py
"""
Room repositories package.
"""

from app.repositories.room.room_repository import RoomRepository
from app.repositories.room.allocation_repository import AllocationRepository

__all__ = ["RoomRepository", "AllocationRepository"]
