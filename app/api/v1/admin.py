"""
Admin endpoints: student and warden registries, account activation.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api import deps
from app.models.user.user import User
from app.schemas.common.response import MessageResponse, SuccessResponse
from app.schemas.student import StudentCreate, StudentResponse, StudentUpdate
from app.schemas.user.user_response import UserResponse
from app.schemas.warden import WardenCreate, WardenResponse
from app.services.auth.auth_service import AuthService
from app.services.student.student_service import StudentService
from app.services.users.warden_service import WardenService

router = APIRouter(prefix="/admin", tags=["Admin Management"])


# --- Students -------------------------------------------------------------------

@router.post(
    "/students",
    response_model=SuccessResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(
    payload: StudentCreate,
    current_user: User = Depends(deps.get_admin_user),
    students: StudentService = Depends(deps.get_student_service),
):
    student = students.create(payload, created_by=current_user.id)
    return SuccessResponse[StudentResponse].create(
        "Student created successfully",
        StudentResponse.model_validate(student),
    )


@router.get("/students", response_model=SuccessResponse[List[StudentResponse]])
def list_students(
    room_id: Optional[str] = Query(default=None),
    unassigned: bool = Query(default=False),
    _: User = Depends(deps.get_admin_user),
    students: StudentService = Depends(deps.get_student_service),
):
    items = students.list(room_id=room_id, unassigned_only=unassigned)
    return SuccessResponse[List[StudentResponse]].create(
        f"{len(items)} students found",
        [StudentResponse.model_validate(item) for item in items],
    )


@router.get("/students/{student_id}", response_model=SuccessResponse[StudentResponse])
def get_student(
    student_id: str,
    _: User = Depends(deps.get_admin_user),
    students: StudentService = Depends(deps.get_student_service),
):
    return SuccessResponse[StudentResponse].create(
        "Student fetched",
        StudentResponse.model_validate(students.get(student_id)),
    )


@router.put("/students/{student_id}", response_model=SuccessResponse[StudentResponse])
def update_student(
    student_id: str,
    payload: StudentUpdate,
    _: User = Depends(deps.get_admin_user),
    students: StudentService = Depends(deps.get_student_service),
):
    student = students.update(student_id, payload)
    return SuccessResponse[StudentResponse].create(
        "Student updated successfully",
        StudentResponse.model_validate(student),
    )


@router.delete("/students/{student_id}", response_model=MessageResponse)
def delete_student(
    student_id: str,
    _: User = Depends(deps.get_admin_user),
    students: StudentService = Depends(deps.get_student_service),
):
    students.delete(student_id)
    return MessageResponse(message="Student deleted successfully")


# --- Wardens --------------------------------------------------------------------

@router.post(
    "/wardens",
    response_model=SuccessResponse[WardenResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_warden(
    payload: WardenCreate,
    current_user: User = Depends(deps.get_admin_user),
    wardens: WardenService = Depends(deps.get_warden_service),
):
    warden = wardens.create(payload, created_by=current_user.id)
    return SuccessResponse[WardenResponse].create(
        "Warden created successfully",
        WardenResponse.model_validate(warden),
    )


@router.get("/wardens", response_model=SuccessResponse[List[WardenResponse]])
def list_wardens(
    _: User = Depends(deps.get_admin_user),
    wardens: WardenService = Depends(deps.get_warden_service),
):
    items = wardens.list()
    return SuccessResponse[List[WardenResponse]].create(
        f"{len(items)} wardens found",
        [WardenResponse.model_validate(item) for item in items],
    )


@router.get("/wardens/{warden_id}", response_model=SuccessResponse[WardenResponse])
def get_warden(
    warden_id: str,
    _: User = Depends(deps.get_admin_user),
    wardens: WardenService = Depends(deps.get_warden_service),
):
    return SuccessResponse[WardenResponse].create(
        "Warden fetched",
        WardenResponse.model_validate(wardens.get(warden_id)),
    )


@router.delete("/wardens/{warden_id}", response_model=MessageResponse)
def delete_warden(
    warden_id: str,
    _: User = Depends(deps.get_admin_user),
    wardens: WardenService = Depends(deps.get_warden_service),
):
    wardens.delete(warden_id)
    return MessageResponse(message="Warden deleted successfully")


# --- Accounts -------------------------------------------------------------------

@router.put("/users/{user_id}/activate", response_model=SuccessResponse[UserResponse])
def activate_user(
    user_id: str,
    current_user: User = Depends(deps.get_admin_user),
    auth: AuthService = Depends(deps.get_auth_service),
):
    user = auth.set_active(user_id, True, acting_user_id=current_user.id)
    return SuccessResponse[UserResponse].create("User activated", UserResponse.model_validate(user))


@router.put("/users/{user_id}/deactivate", response_model=SuccessResponse[UserResponse])
def deactivate_user(
    user_id: str,
    current_user: User = Depends(deps.get_admin_user),
    auth: AuthService = Depends(deps.get_auth_service),
):
    user = auth.set_active(user_id, False, acting_user_id=current_user.id)
    return SuccessResponse[UserResponse].create("User deactivated", UserResponse.model_validate(user))
