"""
Student models package.
"""

from app.models.student.student import Student

__all__ = ["Student"]
