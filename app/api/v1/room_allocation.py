"""
Room allocation endpoints: bed-level ledger plus allocate, deallocate and
transfer flows. Admin or warden only.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api import deps
from app.models.user.user import User
from app.schemas.common.response import SuccessResponse
from app.schemas.room import (
    AllocationCreate,
    AllocationResponse,
    DeallocateRequest,
    OccupancyResponse,
    PaymentStatusUpdate,
    ReleaseRequest,
    RoomResponse,
    StudentRoomResponse,
    TransferRequest,
)
from app.schemas.room.room_response import OccupantSummary
from app.schemas.student import StudentResponse
from app.services.room.allocation_service import AllocationService
from app.services.room.occupancy_service import OccupancyService
from app.services.room.room_service import RoomService
from app.services.student.student_service import StudentService

router = APIRouter(prefix="/room-allocation", tags=["Room Allocation"])


@router.post("/allocate", response_model=SuccessResponse[OccupancyResponse])
def allocate_room(
    payload: AllocationCreate,
    current_user: User = Depends(deps.get_staff_user),
    allocations: AllocationService = Depends(deps.get_allocation_service),
):
    allocation = allocations.allocate(
        payload.student_id,
        payload.room_id,
        bed_number=payload.bed_number,
        payment_status=payload.payment_status,
        start_date=payload.start_date,
        allocated_by=current_user.id,
    )
    return SuccessResponse[OccupancyResponse].create(
        "Room allocated successfully",
        OccupancyResponse(
            student=StudentResponse.model_validate(allocation.student),
            room=RoomResponse.model_validate(allocation.room),
            allocation=AllocationResponse.model_validate(allocation),
        ),
    )


@router.post("/deallocate", response_model=SuccessResponse[OccupancyResponse])
def deallocate_room(
    payload: DeallocateRequest,
    _: User = Depends(deps.get_staff_user),
    occupancy: OccupancyService = Depends(deps.get_occupancy_service),
):
    result = occupancy.deallocate(payload.student_id)
    return SuccessResponse[OccupancyResponse].create(
        "Room deallocated successfully",
        OccupancyResponse.from_result(result),
    )


@router.post("/transfer", response_model=SuccessResponse[OccupancyResponse])
def transfer_room(
    payload: TransferRequest,
    current_user: User = Depends(deps.get_staff_user),
    allocations: AllocationService = Depends(deps.get_allocation_service),
):
    result = allocations.transfer(
        payload.student_id,
        payload.from_room_id,
        payload.to_room_id,
        bed_number=payload.bed_number,
        allocated_by=current_user.id,
    )
    return SuccessResponse[OccupancyResponse].create(
        "Student transferred successfully",
        OccupancyResponse.from_result(result),
    )


@router.get("/rooms", response_model=SuccessResponse[List[RoomResponse]])
def list_available_rooms(
    _: User = Depends(deps.get_staff_user),
    rooms: RoomService = Depends(deps.get_room_service),
):
    items = rooms.list(has_vacancy=True)
    return SuccessResponse[List[RoomResponse]].create(
        f"{len(items)} rooms with free beds",
        [RoomResponse.model_validate(room) for room in items],
    )


@router.get("/students", response_model=SuccessResponse[List[StudentResponse]])
def list_unassigned_students(
    _: User = Depends(deps.get_staff_user),
    students: StudentService = Depends(deps.get_student_service),
):
    items = students.list(unassigned_only=True)
    return SuccessResponse[List[StudentResponse]].create(
        f"{len(items)} students without a room",
        [StudentResponse.model_validate(student) for student in items],
    )


@router.get("/student/{student_id}", response_model=SuccessResponse[StudentRoomResponse])
def get_student_allocation(
    student_id: str,
    _: User = Depends(deps.get_staff_user),
    students: StudentService = Depends(deps.get_student_service),
):
    view = students.get_with_room(student_id)
    return SuccessResponse[StudentRoomResponse].create(
        "Student room details",
        StudentRoomResponse(
            student=StudentResponse.model_validate(view.student),
            room=RoomResponse.model_validate(view.room) if view.room is not None else None,
            roommates=[OccupantSummary.model_validate(mate) for mate in view.roommates],
        ),
    )


@router.get("/allocations", response_model=SuccessResponse[List[AllocationResponse]])
def list_allocations(
    student_id: Optional[str] = Query(default=None),
    room_id: Optional[str] = Query(default=None),
    active_only: bool = Query(default=False),
    _: User = Depends(deps.get_staff_user),
    allocations: AllocationService = Depends(deps.get_allocation_service),
):
    if student_id is not None and room_id is None:
        items = allocations.list_for_student(student_id)
        if active_only:
            items = [item for item in items if item.is_active]
    elif room_id is not None and student_id is None:
        items = allocations.list_for_room(room_id, active_only=active_only)
    else:
        items = allocations.list_allocations(student_id=student_id, room_id=room_id, active_only=active_only)
    return SuccessResponse[List[AllocationResponse]].create(
        f"{len(items)} allocations found",
        [AllocationResponse.model_validate(item) for item in items],
    )


@router.post("/allocations/{allocation_id}/release", response_model=SuccessResponse[AllocationResponse])
def release_allocation(
    allocation_id: str,
    payload: Optional[ReleaseRequest] = None,
    _: User = Depends(deps.get_staff_user),
    allocations: AllocationService = Depends(deps.get_allocation_service),
):
    request = payload or ReleaseRequest()
    allocation = allocations.release(allocation_id, status=request.status, end_date=request.end_date)
    return SuccessResponse[AllocationResponse].create(
        "Allocation released",
        AllocationResponse.model_validate(allocation),
    )


@router.put("/allocations/{allocation_id}/payment", response_model=SuccessResponse[AllocationResponse])
def update_payment_status(
    allocation_id: str,
    payload: PaymentStatusUpdate,
    _: User = Depends(deps.get_staff_user),
    allocations: AllocationService = Depends(deps.get_allocation_service),
):
    allocation = allocations.update_payment_status(allocation_id, payload.payment_status)
    return SuccessResponse[AllocationResponse].create(
        "Payment status updated",
        AllocationResponse.model_validate(allocation),
    )
