"""
Warden models package.
"""

from app.models.warden.warden import Warden

__all__ = ["Warden"]
