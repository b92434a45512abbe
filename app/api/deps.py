# app/api/deps.py
"""
FastAPI dependencies: database session, acting principal, role checks and
service factories.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from app.api import deps

    router = APIRouter()

    @router.get("/me")
    def read_me(current_user = Depends(deps.get_current_user)):
        return current_user
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.db.session import get_db
from app.models.base.enums import UserRole
from app.models.user.user import User
from app.services.auth.auth_service import AuthService
from app.services.room.allocation_service import AllocationService
from app.services.room.occupancy_service import OccupancyService
from app.services.room.room_service import RoomService
from app.services.student.student_service import StudentService
from app.services.users.warden_service import WardenService

bearer_scheme = HTTPBearer(auto_error=False)


# --- Authentication & Authorization -------------------------------------------

def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Bearer header first, then the auth cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


def get_current_user(
    token: Optional[str] = Depends(get_access_token),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise AuthenticationError("Not authorized to access this route")

    user = AuthService(db).resolve_principal(token)
    return user


class RoleChecker:
    """Dependency admitting only principals holding one of ``roles``."""

    def __init__(self, *roles: UserRole):
        self.roles = roles

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in self.roles:
            raise AuthorizationError(
                f"User role {current_user.role.value} is not authorized to access this route"
            )
        return current_user


def require_roles(*roles: UserRole) -> RoleChecker:
    return RoleChecker(*roles)


get_admin_user = require_roles(UserRole.ADMIN)
get_staff_user = require_roles(UserRole.ADMIN, UserRole.WARDEN)
get_student_user = require_roles(UserRole.STUDENT)


# --- Services -------------------------------------------------------------------

def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_occupancy_service(db: Session = Depends(get_db)) -> OccupancyService:
    return OccupancyService(db)


def get_room_service(occupancy: OccupancyService = Depends(get_occupancy_service)) -> RoomService:
    return RoomService(occupancy.db, occupancy=occupancy)


def get_allocation_service(occupancy: OccupancyService = Depends(get_occupancy_service)) -> AllocationService:
    return AllocationService(occupancy.db, occupancy=occupancy)


def get_student_service(occupancy: OccupancyService = Depends(get_occupancy_service)) -> StudentService:
    return StudentService(occupancy.db, occupancy=occupancy)


def get_warden_service(db: Session = Depends(get_db)) -> WardenService:
    return WardenService(db)


__all__ = [
    "get_db",
    "get_access_token",
    "get_current_user",
    "RoleChecker",
    "require_roles",
    "get_admin_user",
    "get_staff_user",
    "get_student_user",
    "get_auth_service",
    "get_occupancy_service",
    "get_room_service",
    "get_allocation_service",
    "get_student_service",
    "get_warden_service",
]
