"""
User response schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from app.models.base.enums import UserRole
from app.schemas.common.base import BaseResponseSchema, BaseSchema
from app.schemas.student.student_response import StudentResponse
from app.schemas.warden.warden import WardenResponse

__all__ = ["UserResponse", "ProfileResponse"]


class UserResponse(BaseResponseSchema):
    """Account as seen by clients. Never includes the password hash."""

    email: str
    first_name: str
    last_name: Optional[str] = None
    full_name: str
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    student_code: Optional[str] = None
    staff_code: Optional[str] = None
    last_login_at: Optional[datetime] = None


class ProfileResponse(BaseSchema):
    """The signed-in account with its role-specific profile."""

    user: UserResponse
    student: Optional[StudentResponse] = None
    warden: Optional[WardenResponse] = None
