"""
User models package.
"""

from app.models.user.user import User

__all__ = ["User"]
