"""
Custom Exceptions for the Hostel Management Application

This module defines the exception taxonomy used throughout the application.
Every exception carries a machine-readable error code (the error kind), a
human-readable message and the HTTP status it maps to.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error kinds for the application"""
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID_STATE = "INVALID_STATE"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TIMEOUT = "TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the response envelope"""
        return {
            "success": False,
            "message": self.message,
            "error_code": self.error_code.value,
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# Not Found
# ========================================

class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.NOT_FOUND, details, 404)


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: Optional[str] = None):
        super().__init__("User", user_id)


class StudentNotFoundError(ResourceNotFoundError):
    def __init__(self, student_id: Optional[str] = None):
        super().__init__("Student", student_id)


class WardenNotFoundError(ResourceNotFoundError):
    def __init__(self, warden_id: Optional[str] = None):
        super().__init__("Warden", warden_id)


class RoomNotFoundError(ResourceNotFoundError):
    def __init__(self, room_id: Optional[str] = None):
        super().__init__("Room", room_id)


class AllocationNotFoundError(ResourceNotFoundError):
    def __init__(self, allocation_id: Optional[str] = None):
        super().__init__("Allocation", allocation_id)


# ========================================
# Conflict
# ========================================

class ConflictError(BaseAppException):
    """Exception raised when a request conflicts with current state"""

    def __init__(
        self,
        message: str = "Request conflicts with the current state",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.CONFLICT, details, 409)


class DuplicateEntryError(ConflictError):
    """Exception raised for unique key violations"""

    def __init__(self, message: str = "Duplicate entry", field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)


class RoomFullError(ConflictError):
    """Exception raised when a room has no free place left"""

    def __init__(self, room_id: Optional[str] = None, capacity: Optional[int] = None):
        super().__init__("Room is full", {"room_id": room_id, "capacity": capacity})


class StudentAlreadyAssignedError(ConflictError):
    """Exception raised when a student already has a room"""

    def __init__(self, student_id: Optional[str] = None, message: str = "Student already has a room allocated"):
        super().__init__(message, {"student_id": student_id})


class StudentNotAssignedError(ConflictError):
    """Exception raised when a student is not in the expected room"""

    def __init__(
        self,
        student_id: Optional[str] = None,
        room_id: Optional[str] = None,
        message: str = "Student is not assigned to this room"
    ):
        super().__init__(message, {"student_id": student_id, "room_id": room_id})


class BedOccupiedError(ConflictError):
    """Exception raised when a bed already has an active allocation"""

    def __init__(self, room_id: Optional[str] = None, bed_number: Optional[int] = None):
        super().__init__(
            f"Bed {bed_number} is already occupied in this room",
            {"room_id": room_id, "bed_number": bed_number}
        )


class CapacityBelowOccupancyError(ConflictError):
    """Exception raised when capacity would drop below current occupancy"""

    def __init__(self, capacity: int, occupied: int):
        super().__init__(
            f"New capacity ({capacity}) cannot be less than current occupancy ({occupied})",
            {"capacity": capacity, "occupied": occupied}
        )


class ConcurrencyConflictError(ConflictError):
    """Exception raised when concurrent writers exhausted the retry budget"""

    def __init__(self, message: str = "Room state changed, retry", attempts: Optional[int] = None):
        super().__init__(message, {"attempts": attempts})


# ========================================
# Invalid State
# ========================================

class InvalidStateError(BaseAppException):
    """Exception raised when an operation is not allowed in the current state"""

    def __init__(self, message: str = "Operation not allowed in current state", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.INVALID_STATE, details, 400)


class RoomUnderMaintenanceError(InvalidStateError):
    def __init__(self, room_id: Optional[str] = None):
        super().__init__("Room is not available: Status - Maintenance", {"room_id": room_id})


# ========================================
# Authentication & Authorization
# ========================================

class AuthenticationError(BaseAppException):
    """Exception raised when authentication fails"""

    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(message, ErrorCode.UNAUTHORIZED, None, 401)


class InvalidTokenError(AuthenticationError):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class AuthorizationError(BaseAppException):
    """Exception raised when the principal lacks the required role"""

    def __init__(self, message: str = "Access forbidden"):
        super().__init__(message, ErrorCode.FORBIDDEN, None, 403)


# ========================================
# Validation, Timeout, Internal
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details, 422)


class OperationTimeoutError(BaseAppException):
    """Exception raised when an operation exceeded its deadline and was rolled back"""

    def __init__(
        self,
        message: str = "Operation timed out",
        timeout_seconds: Optional[float] = None,
        operation: Optional[str] = None
    ):
        details = {
            "timeout_seconds": timeout_seconds,
            "operation": operation
        }
        super().__init__(message, ErrorCode.TIMEOUT, details, 504)


class DatabaseError(BaseAppException):
    """Exception raised when a storage operation fails"""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, ErrorCode.INTERNAL_ERROR, None, 500)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ResourceNotFoundError",
    "UserNotFoundError",
    "StudentNotFoundError",
    "WardenNotFoundError",
    "RoomNotFoundError",
    "AllocationNotFoundError",
    "ConflictError",
    "DuplicateEntryError",
    "RoomFullError",
    "StudentAlreadyAssignedError",
    "StudentNotAssignedError",
    "BedOccupiedError",
    "CapacityBelowOccupancyError",
    "ConcurrencyConflictError",
    "InvalidStateError",
    "RoomUnderMaintenanceError",
    "AuthenticationError",
    "InvalidTokenError",
    "TokenExpiredError",
    "AuthorizationError",
    "ValidationError",
    "OperationTimeoutError",
    "DatabaseError",
]
