"""
Warden schemas.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from app.models.base.enums import Block
from app.schemas.common.base import BaseCreateSchema, BaseResponseSchema

__all__ = ["WardenCreate", "WardenResponse"]


class WardenCreate(BaseCreateSchema):
    """Creates a warden account and its staff profile."""

    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    contact_number: Optional[str] = Field(default=None, max_length=20)
    qualification: Optional[str] = Field(default=None, max_length=255)
    assigned_blocks: List[Block] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("assigned_blocks")
    @classmethod
    def unique_blocks(cls, v: List[Block]) -> List[Block]:
        return sorted(set(v), key=lambda block: block.value)


class WardenResponse(BaseResponseSchema):
    user_id: str
    name: str
    email: str
    employee_id: str
    contact_number: Optional[str] = None
    qualification: Optional[str] = None
    assigned_blocks: List[Block] = Field(default_factory=list)
