"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the hostel occupancy service
"""

from fastapi import APIRouter

from app.api.v1 import admin, auth, room_allocation, rooms, students
from app.core.logging import get_logger
from app.schemas.common.response import ErrorResponse

logger = get_logger(__name__)

# Create main API v1 router with proper configuration
router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        403: {"model": ErrorResponse, "description": "Forbidden"},
        404: {"model": ErrorResponse, "description": "Not Found"},
        409: {"model": ErrorResponse, "description": "Conflict"},
        422: {"model": ErrorResponse, "description": "Validation Error"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
        504: {"model": ErrorResponse, "description": "Timeout"},
    }
)

router.include_router(auth.router)
router.include_router(admin.router)
router.include_router(rooms.router)
router.include_router(room_allocation.router)
router.include_router(students.router)

__all__ = ["router"]
