# app/repositories/room/room_repository.py
"""
Room repository with listing filters and block aggregates.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import and_, case, func, select
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import RoomNotFoundError
from app.models.base.enums import Block, Floor, RoomStatus, RoomType
from app.models.room.room import Room
from app.repositories.base.base_repository import BaseRepository


class RoomRepository(BaseRepository[Room]):
    """
    Repository for Room entity.

    Handles:
    - Room lookups by id and by (block, room number)
    - Filtered listings with occupants loaded
    - Per-block occupancy aggregates
    """

    not_found_error = RoomNotFoundError

    def __init__(self, db: Session):
        super().__init__(Room, db)

    def find_by_block_and_number(self, block: Block, room_number: str) -> Optional[Room]:
        return self.find_one_by_criteria({"block": block, "room_number": room_number})

    def get_with_occupants(self, room_id: str) -> Room:
        stmt = select(Room).options(selectinload(Room.occupants)).where(Room.id == room_id)
        room = self.db.execute(stmt).scalars().first()
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def list_rooms(
        self,
        block: Optional[Block] = None,
        floor: Optional[Floor] = None,
        status: Optional[RoomStatus] = None,
        room_type: Optional[RoomType] = None,
        has_vacancy: Optional[bool] = None,
    ) -> List[Room]:
        """
        List rooms ordered by block and number.

        Args:
            block: Filter by block letter
            floor: Filter by floor
            status: Filter by derived status
            room_type: Filter by room type
            has_vacancy: Only rooms with (True) or without (False) a free bed
        """
        stmt = select(Room).options(selectinload(Room.occupants))
        if block is not None:
            stmt = stmt.where(Room.block == block)
        if floor is not None:
            stmt = stmt.where(Room.floor == floor)
        if status is not None:
            stmt = stmt.where(Room.status == status)
        if room_type is not None:
            stmt = stmt.where(Room.room_type == room_type)
        if has_vacancy is True:
            stmt = stmt.where(and_(Room.status == RoomStatus.AVAILABLE, Room.occupied_count < Room.capacity))
        elif has_vacancy is False:
            stmt = stmt.where(Room.status != RoomStatus.AVAILABLE)
        stmt = stmt.order_by(Room.block, Room.room_number)
        return list(self.db.execute(stmt).scalars())

    def block_statistics(self) -> List[Dict[str, Any]]:
        """
        Aggregate room and bed counts per block.

        Returns:
            One dict per block that has rooms, ordered by block
        """
        stmt = (
            select(
                Room.block,
                func.count(Room.id).label("total_rooms"),
                func.sum(case((Room.status == RoomStatus.FULL, 1), else_=0)).label("full_rooms"),
                func.sum(case((Room.status == RoomStatus.MAINTENANCE, 1), else_=0)).label("maintenance_rooms"),
                func.sum(
                    case(
                        (and_(Room.occupied_count == 0, Room.status != RoomStatus.MAINTENANCE), 1),
                        else_=0,
                    )
                ).label("vacant_rooms"),
                func.sum(Room.capacity).label("total_beds"),
                func.sum(Room.occupied_count).label("occupied_beds"),
            )
            .group_by(Room.block)
            .order_by(Room.block)
        )
        return [dict(row._mapping) for row in self.db.execute(stmt)]


__all__ = ["RoomRepository"]
