# app/services/room/room_service.py
"""
Room registry: room CRUD, capacity edits, maintenance toggling and block
summaries.

Field edits never write ``occupied_count`` or ``status`` directly; anything
that affects them is routed through the occupancy coordinator.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import (
    CapacityBelowOccupancyError,
    ConflictError,
    DuplicateEntryError,
    ValidationError,
)
from app.models.base.enums import Block, Floor, RoomStatus, RoomType
from app.models.room.room import Room
from app.repositories.room.room_repository import RoomRepository
from app.schemas.room.room_base import RoomCreate, RoomUpdate
from app.services.base.base_service import BaseService
from app.services.room.occupancy_service import OccupancyService


def room_code_for(room_number: str) -> str:
    return f"RM-{room_number}"


def _column_values(values: Dict[str, Any]) -> Dict[str, Any]:
    if values.get("facilities") is not None:
        values["facilities"] = [getattr(item, "value", item) for item in values["facilities"]]
    return values


class RoomService(BaseService[Room, RoomRepository]):
    """
    Room registry operations.
    """

    def __init__(self, db_session: Session, occupancy: Optional[OccupancyService] = None):
        super().__init__(RoomRepository(db_session), db_session)
        self.rooms = self.repository
        self.occupancy = occupancy or OccupancyService(db_session)

    @staticmethod
    def _check_number_matches_block(block: Block, room_number: str) -> None:
        if not room_number.startswith(f"{block.value}-"):
            raise ValidationError(
                "Room number must start with its block letter",
                {"room_number": [f"expected prefix '{block.value}-'"]},
            )

    def _check_unique(self, block: Block, room_number: str, exclude_id: Optional[str] = None) -> None:
        existing = self.rooms.find_by_block_and_number(block, room_number)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateEntryError("Room number already exists in this block.", field="room_number")

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    def create(self, data: RoomCreate) -> Room:
        """
        Create an empty room.

        Raises:
            DuplicateEntryError: (block, room_number) already taken
        """
        values = _column_values(data.model_dump())
        block = Block(values["block"])
        self._check_number_matches_block(block, values["room_number"])

        with self.transactions.start("create_room"):
            self._check_unique(block, values["room_number"])
            room = Room(
                **values,
                room_code=room_code_for(values["room_number"]),
                occupied_count=0,
            )
            if room.is_under_maintenance:
                room.last_maintenance = datetime.now(timezone.utc)
            self.occupancy.recompute(room)
            self.rooms.create(room)

        self._logger.info("Room created", extra={"room_id": room.id, "room_number": room.room_number})
        return room

    def get(self, room_id: str) -> Room:
        return self.rooms.get_with_occupants(room_id)

    def list(
        self,
        block: Optional[Block] = None,
        floor: Optional[Floor] = None,
        status: Optional[RoomStatus] = None,
        room_type: Optional[RoomType] = None,
        has_vacancy: Optional[bool] = None,
    ) -> List[Room]:
        return self.rooms.list_rooms(
            block=block,
            floor=floor,
            status=status,
            room_type=room_type,
            has_vacancy=has_vacancy,
        )

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update(self, room_id: str, data: RoomUpdate) -> Room:
        """
        Edit a room.

        Turning maintenance on vacates the room first; turning it off makes
        the room available again.

        Raises:
            CapacityBelowOccupancyError: new capacity below current occupancy
            ConflictError: an active allocation holds a bed beyond the new capacity
            DuplicateEntryError: new (block, room_number) already taken
        """
        changes: Dict[str, Any] = _column_values(data.model_dump(exclude_unset=True))
        maintenance = changes.pop("is_under_maintenance", None)

        def work() -> Room:
            room = self.occupancy.load_room(room_id)

            block = Block(changes.get("block", room.block))
            room_number = changes.get("room_number", room.room_number)
            if "block" in changes or "room_number" in changes:
                self._check_number_matches_block(block, room_number)
                self._check_unique(block, room_number, exclude_id=room.id)
                changes["room_code"] = room_code_for(room_number)

            if maintenance is True and not room.is_under_maintenance:
                removed = self.occupancy.apply_vacate(room)
                room.is_under_maintenance = True
                room.last_maintenance = datetime.now(timezone.utc)
                self._logger.info(
                    "Room put under maintenance",
                    extra={"room_id": room.id, "students_removed": removed},
                )
            elif maintenance is False and room.is_under_maintenance:
                room.is_under_maintenance = False
                self._logger.info("Room back from maintenance", extra={"room_id": room.id})

            new_capacity = changes.get("capacity")
            if new_capacity is not None:
                occupied = len(room.occupants)
                if new_capacity < occupied:
                    raise CapacityBelowOccupancyError(new_capacity, occupied)
                highest_bed = max(self.occupancy.allocations.occupied_beds(room.id), default=0)
                if new_capacity < highest_bed:
                    raise ConflictError(
                        f"Bed {highest_bed} is allocated; capacity cannot drop below it",
                        {"capacity": new_capacity, "bed_number": highest_bed},
                    )

            self.rooms.update(room, changes)
            self.occupancy.recompute(room)
            self.rooms.flush()
            return room

        return self.occupancy.execute("update_room", self.occupancy.room_lock_keys(room_id), work)

    def delete(self, room_id: str) -> int:
        """
        Vacate and delete a room in one transaction.

        Returns:
            Number of students that were removed from the room
        """
        def work() -> int:
            room = self.occupancy.load_room(room_id)
            removed = self.occupancy.apply_vacate(room)
            self.rooms.delete(room)
            return removed

        removed = self.occupancy.execute("delete_room", self.occupancy.room_lock_keys(room_id), work)
        self._logger.info("Room deleted", extra={"room_id": room_id, "students_removed": removed})
        return removed

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def block_summary(self) -> List[Dict[str, Any]]:
        """
        Per-block room and bed statistics, one entry for every block.
        """
        rows = {Block(row["block"]): row for row in self.rooms.block_statistics()}
        summary = []
        for block in Block:
            row = rows.get(block, {})
            total_beds = int(row.get("total_beds") or 0)
            occupied_beds = int(row.get("occupied_beds") or 0)
            summary.append({
                "block": block,
                "total_rooms": int(row.get("total_rooms") or 0),
                "full_rooms": int(row.get("full_rooms") or 0),
                "maintenance_rooms": int(row.get("maintenance_rooms") or 0),
                "vacant_rooms": int(row.get("vacant_rooms") or 0),
                "total_beds": total_beds,
                "occupied_beds": occupied_beds,
                "occupancy_percentage": round(occupied_beds * 100.0 / total_beds, 2) if total_beds else 0.0,
            })
        return summary


__all__ = ["RoomService", "room_code_for"]
