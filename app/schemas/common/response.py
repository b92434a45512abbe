# --- File: app/schemas/common/response.py ---
"""
Standard API response wrappers.
"""

from typing import Generic, List, TypeVar, Union

from pydantic import Field

from app.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "SuccessResponse",
    "MessageResponse",
    "ErrorDetail",
    "ErrorResponse",
]


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response."""

    success: bool = Field(default=True, description="Success flag")
    message: str = Field(..., description="Response message")
    data: Union[T, None] = Field(default=None, description="Response data")

    @classmethod
    def create(
        cls,
        message: str,
        data: Union[T, None] = None,
    ):
        """Create success response."""
        return cls(success=True, message=message, data=data)


class MessageResponse(BaseSchema):
    """Success response without payload."""

    success: bool = Field(default=True, description="Success flag")
    message: str = Field(..., description="Response message")


class ErrorDetail(BaseSchema):
    """Error detail information."""

    field: Union[str, None] = Field(
        default=None,
        description="Field name causing error",
    )
    message: str = Field(..., description="Error message")
    code: Union[str, None] = Field(
        default=None,
        description="Error code",
    )


class ErrorResponse(BaseSchema):
    """Standard error response."""

    success: bool = Field(default=False, description="Success flag")
    message: str = Field(..., description="Error message")
    error_code: Union[str, None] = Field(
        default=None,
        description="Error kind (NOT_FOUND, CONFLICT, ...)",
    )
    errors: Union[List[ErrorDetail], None] = Field(
        default=None,
        description="Per-field validation errors",
    )
