"""
Room endpoints.

Reads are public; writes and occupancy changes need an admin or warden.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api import deps
from app.models.base.enums import Block, Floor, RoomStatus, RoomType
from app.models.user.user import User
from app.schemas.common.response import SuccessResponse
from app.schemas.room import (
    BlockSummary,
    OccupancyResponse,
    RoomCreate,
    RoomResponse,
    RoomStudentRequest,
    RoomUpdate,
)
from app.services.room.occupancy_service import OccupancyService
from app.services.room.room_service import RoomService

router = APIRouter(prefix="/rooms", tags=["Room Management"])


@router.get("", response_model=SuccessResponse[List[RoomResponse]])
def list_rooms(
    block: Optional[Block] = Query(default=None),
    floor: Optional[Floor] = Query(default=None),
    room_status: Optional[RoomStatus] = Query(default=None, alias="status"),
    room_type: Optional[RoomType] = Query(default=None),
    has_vacancy: Optional[bool] = Query(default=None),
    rooms: RoomService = Depends(deps.get_room_service),
):
    items = rooms.list(
        block=block,
        floor=floor,
        status=room_status,
        room_type=room_type,
        has_vacancy=has_vacancy,
    )
    return SuccessResponse[List[RoomResponse]].create(
        f"{len(items)} rooms found",
        [RoomResponse.model_validate(room) for room in items],
    )


@router.get("/blocks/summary", response_model=SuccessResponse[List[BlockSummary]])
def block_summary(rooms: RoomService = Depends(deps.get_room_service)):
    return SuccessResponse[List[BlockSummary]].create(
        "Block summary",
        [BlockSummary(**entry) for entry in rooms.block_summary()],
    )


@router.get("/{room_id}", response_model=SuccessResponse[RoomResponse])
def get_room(room_id: str, rooms: RoomService = Depends(deps.get_room_service)):
    return SuccessResponse[RoomResponse].create("Room fetched", RoomResponse.model_validate(rooms.get(room_id)))


@router.post("", response_model=SuccessResponse[RoomResponse], status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    _: User = Depends(deps.get_staff_user),
    rooms: RoomService = Depends(deps.get_room_service),
):
    room = rooms.create(payload)
    return SuccessResponse[RoomResponse].create("Room created successfully", RoomResponse.model_validate(room))


@router.put("/{room_id}", response_model=SuccessResponse[RoomResponse])
def update_room(
    room_id: str,
    payload: RoomUpdate,
    _: User = Depends(deps.get_staff_user),
    rooms: RoomService = Depends(deps.get_room_service),
):
    room = rooms.update(room_id, payload)
    return SuccessResponse[RoomResponse].create("Room updated successfully", RoomResponse.model_validate(room))


@router.delete("/{room_id}", response_model=SuccessResponse[dict])
def delete_room(
    room_id: str,
    _: User = Depends(deps.get_staff_user),
    rooms: RoomService = Depends(deps.get_room_service),
):
    removed = rooms.delete(room_id)
    return SuccessResponse[dict].create("Room deleted successfully", {"students_removed": removed})


@router.post("/{room_id}/assign", response_model=SuccessResponse[OccupancyResponse])
def assign_student(
    room_id: str,
    payload: RoomStudentRequest,
    _: User = Depends(deps.get_staff_user),
    occupancy: OccupancyService = Depends(deps.get_occupancy_service),
):
    result = occupancy.assign(payload.student_id, room_id)
    return SuccessResponse[OccupancyResponse].create(
        "Student assigned to room successfully",
        OccupancyResponse.from_result(result),
    )


@router.post("/{room_id}/remove", response_model=SuccessResponse[OccupancyResponse])
def remove_student(
    room_id: str,
    payload: RoomStudentRequest,
    _: User = Depends(deps.get_staff_user),
    occupancy: OccupancyService = Depends(deps.get_occupancy_service),
):
    result = occupancy.remove(payload.student_id, room_id)
    return SuccessResponse[OccupancyResponse].create(
        "Student removed from room successfully",
        OccupancyResponse.from_result(result),
    )
