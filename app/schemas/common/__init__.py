"""
Common schema building blocks.
"""

from app.schemas.common.base import (
    BaseSchema,
    BaseCreateSchema,
    BaseUpdateSchema,
    BaseResponseSchema,
)
from app.schemas.common.response import ErrorDetail, ErrorResponse, MessageResponse, SuccessResponse

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "SuccessResponse",
    "MessageResponse",
    "ErrorDetail",
    "ErrorResponse",
]
