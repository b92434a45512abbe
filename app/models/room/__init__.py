# app/models/room/__init__.py
"""
Room models package.
"""

from app.models.room.room import Room, derive_status
from app.models.room.allocation import Allocation

__all__ = ["Room", "Allocation", "derive_status"]
