# app/services/users/__init__.py
"""
Staff account services.

- WardenService:
    Warden accounts with their staff profiles.
"""

from .warden_service import WardenService

__all__ = [
    "WardenService",
]
