"""
Student services.
"""

from app.services.student.student_service import StudentRoomView, StudentService

__all__ = ["StudentService", "StudentRoomView"]
