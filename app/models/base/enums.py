"""
Database enums shared by models and schemas.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "admin"
    WARDEN = "warden"
    STUDENT = "student"
    STAFF = "staff"


class Block(str, enum.Enum):
    """Hostel blocks."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class Floor(str, enum.Enum):
    FIRST = "1st Floor"
    SECOND = "2nd Floor"
    THIRD = "3rd Floor"
    FOURTH = "4th Floor"


class RoomStatus(str, enum.Enum):
    """Room availability status, always derived from occupancy."""
    AVAILABLE = "Available"
    FULL = "Full"
    MAINTENANCE = "Maintenance"


class RoomType(str, enum.Enum):
    """Room type categorization."""
    AC_BOYS = "AC Room - Boys"
    AC_GIRLS = "AC Room - Girls"
    NON_AC_BOYS = "Non-AC Room - Boys"
    NON_AC_GIRLS = "Non-AC Room - Girls"
    DELUXE_BOYS = "Deluxe Room - Boys"
    DELUXE_GIRLS = "Deluxe Room - Girls"


class Facility(str, enum.Enum):
    AIR_CONDITIONING = "Air Conditioning"
    STUDY_TABLE = "Study Table"
    PREMIUM_FURNITURE = "Premium Furniture"
    HIGH_SPEED_WIFI = "High-Speed WiFi"
    ATTACHED_BATHROOM = "Attached Bathroom"
    FAN = "Fan"
    GEYSER = "Geyser"
    LAUNDRY_SERVICE = "Laundry Service"


class PricePeriod(str, enum.Enum):
    MONTH = "month"
    SEMESTER = "semester"
    YEAR = "year"


class AllocationStatus(str, enum.Enum):
    """Lifecycle of a bed allocation."""
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentStatus(str, enum.Enum):
    PAID = "Paid"
    PARTIAL = "Partial"
    PENDING = "Pending"


__all__ = [
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
