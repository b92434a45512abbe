"""
Student self-service endpoints.
"""

from fastapi import APIRouter, Depends

from app.api import deps
from app.models.user.user import User
from app.schemas.common.response import SuccessResponse
from app.schemas.room import RoomResponse, StudentRoomResponse
from app.schemas.room.room_response import OccupantSummary
from app.schemas.student import StudentResponse
from app.services.student.student_service import StudentService

router = APIRouter(prefix="/students", tags=["Student Management"])


@router.get("/me", response_model=SuccessResponse[StudentResponse])
def read_own_profile(
    current_user: User = Depends(deps.get_student_user),
    students: StudentService = Depends(deps.get_student_service),
):
    student = students.get_by_user(current_user.id)
    return SuccessResponse[StudentResponse].create("Profile fetched", StudentResponse.model_validate(student))


@router.get("/me/room", response_model=SuccessResponse[StudentRoomResponse])
def read_own_room(
    current_user: User = Depends(deps.get_student_user),
    students: StudentService = Depends(deps.get_student_service),
):
    student = students.get_by_user(current_user.id)
    view = students.get_with_room(student.id)
    message = "Room details fetched" if view.room is not None else "No room allocated yet"
    return SuccessResponse[StudentRoomResponse].create(
        message,
        StudentRoomResponse(
            student=StudentResponse.model_validate(view.student),
            room=RoomResponse.model_validate(view.room) if view.room is not None else None,
            roommates=[OccupantSummary.model_validate(mate) for mate in view.roommates],
        ),
    )
