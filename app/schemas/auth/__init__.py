"""
Authentication schemas package.
"""

from app.schemas.auth.login import LoginRequest, LoginResponse
from app.schemas.auth.register import AdminRegisterRequest

__all__ = ["LoginRequest", "LoginResponse", "AdminRegisterRequest"]
