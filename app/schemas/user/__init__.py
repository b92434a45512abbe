"""
User schemas package.
"""

from app.schemas.user.user_response import ProfileResponse, UserResponse

__all__ = ["UserResponse", "ProfileResponse"]
