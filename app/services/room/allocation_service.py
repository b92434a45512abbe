# app/services/room/allocation_service.py
"""
Bed-level allocation ledger.

Records which bed a student holds, for how long, and whether it is paid.
Occupancy itself is changed only through the coordinator primitives, inside
the same transaction as the ledger write.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import BedOccupiedError, ConflictError, ValidationError
from app.core.locking import room_key, student_key
from app.models.base.enums import AllocationStatus, PaymentStatus
from app.models.room.allocation import Allocation
from app.models.room.room import Room
from app.repositories.room.allocation_repository import AllocationRepository
from app.services.base.base_service import BaseService
from app.services.room.occupancy_service import OccupancyResult, OccupancyService


class AllocationService(BaseService[Allocation, AllocationRepository]):
    """
    Allocation ledger operations: allocate, transfer, release and payment
    tracking.
    """

    def __init__(self, db_session: Session, occupancy: Optional[OccupancyService] = None):
        super().__init__(AllocationRepository(db_session), db_session)
        self.allocations = self.repository
        self.occupancy = occupancy or OccupancyService(db_session)

    # ------------------------------------------------------------------
    # Bed selection
    # ------------------------------------------------------------------

    def _choose_bed(self, room: Room, bed_number: Optional[int]) -> int:
        taken = self.allocations.occupied_beds(room.id)

        if bed_number is None:
            for candidate in range(1, room.capacity + 1):
                if candidate not in taken:
                    return candidate
            raise ConflictError("No free bed left in this room", {"room_id": room.id})

        if bed_number < 1 or bed_number > room.capacity:
            raise ValidationError(
                "Bed number exceeds room capacity",
                {"bed_number": [f"must be between 1 and {room.capacity}"]},
            )
        if bed_number in taken:
            raise BedOccupiedError(room.id, bed_number)
        return bed_number

    @staticmethod
    def _check_start_date(start_date: date) -> None:
        if start_date > date.today():
            raise ValidationError(
                "Start date cannot be in the future",
                {"start_date": ["must not be in the future"]},
            )

    def _record(
        self,
        student_id: str,
        room: Room,
        bed_number: int,
        payment_status: PaymentStatus,
        start_date: date,
        allocated_by: Optional[str],
    ) -> Allocation:
        return self.allocations.create(
            Allocation(
                student_id=student_id,
                room_id=room.id,
                bed_number=bed_number,
                start_date=start_date,
                status=AllocationStatus.ACTIVE,
                payment_status=payment_status,
                allocated_by=allocated_by,
            )
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def allocate(
        self,
        student_id: str,
        room_id: str,
        bed_number: Optional[int] = None,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        start_date: Optional[date] = None,
        allocated_by: Optional[str] = None,
    ) -> Allocation:
        """
        Place a student into a room and record the bed they hold.

        The lowest free bed is used when ``bed_number`` is omitted.

        Raises:
            StudentNotFoundError / RoomNotFoundError: unknown ids
            RoomUnderMaintenanceError: room is under maintenance
            StudentAlreadyAssignedError / RoomFullError: occupancy conflicts
            BedOccupiedError: the bed already has an active allocation
            ValidationError: bed number out of range or start date in the future
        """
        start = start_date or date.today()
        self._check_start_date(start)

        def work() -> Allocation:
            student = self.occupancy.load_student(student_id)
            room = self.occupancy.load_room(room_id)

            self.occupancy.check_assign(student, room)
            bed = self._choose_bed(room, bed_number)
            self.occupancy.apply_assign(student, room)

            allocation = self._record(student.id, room, bed, payment_status, start, allocated_by)
            self._logger.info(
                "Allocation recorded",
                extra={"allocation_id": allocation.id, "room_id": room.id, "bed_number": bed},
            )
            return allocation

        return self.occupancy.execute(
            "allocate",
            self.occupancy.student_lock_keys(student_id, room_id),
            work,
        )

    def transfer(
        self,
        student_id: str,
        from_room_id: str,
        to_room_id: str,
        bed_number: Optional[int] = None,
        allocated_by: Optional[str] = None,
    ) -> OccupancyResult:
        """
        Move a student between rooms, closing the old allocation and opening
        one in the target room. All or nothing.
        """
        if from_room_id == to_room_id:
            raise ConflictError("Source and target room are the same", {"room_id": to_room_id})

        def work() -> OccupancyResult:
            student = self.occupancy.load_student(student_id)
            from_room = self.occupancy.load_room(from_room_id)
            to_room = self.occupancy.load_room(to_room_id)

            previous = self.allocations.find_active_for_student(student.id, from_room.id)
            payment_status = previous[0].payment_status if previous else PaymentStatus.PENDING

            self.occupancy.apply_remove(student, from_room)
            self.occupancy.check_assign(student, to_room)
            bed = self._choose_bed(to_room, bed_number)
            self.occupancy.apply_assign(student, to_room)
            self._record(student.id, to_room, bed, payment_status, date.today(), allocated_by)

            return OccupancyResult(student=student, room=to_room, previous_room=from_room)

        return self.occupancy.execute(
            "allocation_transfer",
            self.occupancy.student_lock_keys(student_id, from_room_id, to_room_id),
            work,
        )

    def release(
        self,
        allocation_id: str,
        status: AllocationStatus = AllocationStatus.COMPLETED,
        end_date: Optional[date] = None,
    ) -> Allocation:
        """
        Close an active allocation and take the student out of the room.

        Raises:
            AllocationNotFoundError: unknown allocation
            ConflictError: allocation is not active
            ValidationError: ``status`` is not a closing status or
                ``end_date`` precedes the start date
        """
        if status == AllocationStatus.ACTIVE:
            raise ValidationError("Release status must be Completed or Cancelled")

        entry = self.allocations.get_by_id(allocation_id)
        student_id, room_id = entry.student_id, entry.room_id

        def lock_keys() -> List[str]:
            return [student_key(student_id), room_key(room_id)]

        def work() -> Allocation:
            allocation = self.allocations.get_by_id(allocation_id, for_update=True)
            if allocation.status != AllocationStatus.ACTIVE:
                raise ConflictError(
                    f"Allocation is already {allocation.status.value}",
                    {"allocation_id": allocation.id},
                )

            closing_date = end_date or date.today()
            if closing_date < allocation.start_date:
                raise ValidationError(
                    "End date must be after start date",
                    {"end_date": ["must not precede start_date"]},
                )

            student = self.occupancy.load_student(student_id)
            room = self.occupancy.load_room(room_id)
            if student.room_id == room.id:
                self.occupancy.apply_remove(student, room, close_as=status, end_date=closing_date)
            else:
                allocation.status = status
                allocation.end_date = closing_date
                self.db.flush()

            self._logger.info(
                "Allocation released",
                extra={"allocation_id": allocation.id, "status": status.value},
            )
            return allocation

        return self.occupancy.execute("release", lock_keys, work)

    def update_payment_status(self, allocation_id: str, payment_status: PaymentStatus) -> Allocation:
        with self.transactions.start("update_payment_status"):
            allocation = self.allocations.get_by_id(allocation_id)
            allocation.payment_status = payment_status
        return allocation

    def get(self, allocation_id: str) -> Allocation:
        return self.allocations.get_by_id(allocation_id)

    def list_for_student(self, student_id: str) -> List[Allocation]:
        self.occupancy.students.get_by_id(student_id)
        return self.allocations.list_allocations(student_id=student_id)

    def list_for_room(self, room_id: str, active_only: bool = False) -> List[Allocation]:
        self.occupancy.rooms.get_by_id(room_id)
        return self.allocations.list_allocations(room_id=room_id, active_only=active_only)

    def list_allocations(
        self,
        student_id: Optional[str] = None,
        room_id: Optional[str] = None,
        active_only: bool = False,
    ) -> List[Allocation]:
        return self.allocations.list_allocations(student_id=student_id, room_id=room_id, active_only=active_only)


__all__ = ["AllocationService"]
