"""
Student schemas package.
"""

from app.schemas.student.student_base import StudentBase, StudentCreate, StudentUpdate
from app.schemas.student.student_response import StudentResponse

__all__ = [
    "StudentBase",
    "StudentCreate",
    "StudentUpdate",
    "StudentResponse",
]
