"""
Warden schemas package.
"""

from app.schemas.warden.warden import WardenCreate, WardenResponse

__all__ = ["WardenCreate", "WardenResponse"]
