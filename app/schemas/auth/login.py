# --- File: app/schemas/auth/login.py ---
"""
Login schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.models.base.enums import UserRole
from app.schemas.common.base import BaseCreateSchema, BaseSchema
from app.schemas.user.user_response import UserResponse

__all__ = [
    "LoginRequest",
    "LoginResponse",
]


class LoginRequest(BaseCreateSchema):
    """
    Email/password-based login request.

    ``role`` optionally pins the portal the user signs in to; a mismatch
    is refused.
    """

    email: EmailStr = Field(
        ...,
        description="User email address",
        examples=["user@example.com"],
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User password",
    )
    role: Optional[UserRole] = Field(default=None, description="Expected role of the account")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class LoginResponse(BaseSchema):
    """Issued access token and the signed-in account."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserResponse
