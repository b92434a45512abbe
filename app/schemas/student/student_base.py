"""
Student base schemas.

``room_id`` is never accepted as input; it changes only through room
allocation operations.
"""

from __future__ import annotations

from typing import ClassVar, FrozenSet, Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.common.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema

__all__ = [
    "StudentBase",
    "StudentCreate",
    "StudentUpdate",
]

PHONE_PATTERN = r"^\+?[0-9 \-]{7,20}$"


class StudentBase(BaseSchema):
    """
    Base student schema with profile attributes.
    """

    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    course: Optional[str] = Field(default=None, max_length=100)
    year: Optional[int] = Field(default=None, ge=1, le=6, description="Year of study")
    address: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class StudentCreate(StudentBase, BaseCreateSchema):
    """Creates the student profile together with its login account."""

    password: str = Field(..., min_length=6, max_length=128)


class StudentUpdate(BaseUpdateSchema):
    """Profile edits. Room membership is not editable here."""

    clearable_fields: ClassVar[FrozenSet[str]] = frozenset({"phone", "course", "year", "address"})

    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    course: Optional[str] = Field(default=None, max_length=100)
    year: Optional[int] = Field(default=None, ge=1, le=6)
    address: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v
