"""
Base models package.

Provides the declarative base, mixins, column types and enums for all
database models.
"""

from app.models.base.base_model import Base, BaseModel
from app.models.base.mixins import TimestampMixin, utc_now
from app.models.base.types import enum_type
from app.models.base.enums import (
    UserRole,
    Block,
    Floor,
    RoomStatus,
    RoomType,
    Facility,
    PricePeriod,
    AllocationStatus,
    PaymentStatus,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "utc_now",
    "enum_type",
    "UserRole",
    "Block",
    "Floor",
    "RoomStatus",
    "RoomType",
    "Facility",
    "PricePeriod",
    "AllocationStatus",
    "PaymentStatus",
]
