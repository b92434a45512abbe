"""
Student response schemas.
"""

from __future__ import annotations

from typing import Optional

from app.schemas.common.base import BaseResponseSchema

__all__ = ["StudentResponse"]


class StudentResponse(BaseResponseSchema):
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    course: Optional[str] = None
    year: Optional[int] = None
    address: Optional[str] = None
    student_code: str
    room_id: Optional[str] = None
    is_assigned: bool = False
