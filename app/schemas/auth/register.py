# --- File: app/schemas/auth/register.py ---
"""
Registration schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.common.base import BaseCreateSchema

__all__ = ["AdminRegisterRequest"]


class AdminRegisterRequest(BaseCreateSchema):
    """
    Admin self-registration, gated by the configured registration code.
    """

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=20)
    password: str = Field(..., min_length=8, max_length=128)
    admin_code: str = Field(..., min_length=1, description="Admin registration code")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password", mode="after")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not any(char.isdigit() for char in v) or not any(char.isalpha() for char in v):
            raise ValueError("Password must contain letters and digits")
        return v
