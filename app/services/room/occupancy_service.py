# app/services/room/occupancy_service.py
"""
Occupancy coordinator.

The only writer of ``Room.occupied_count``, ``Room.status`` and
``Student.room_id``. Every operation runs as one unit:

1. take the in-process locks of every room and student it touches, in
   sorted order and with a bounded wait;
2. read those rows inside a transaction (``FOR UPDATE`` where supported),
   validate, write;
3. commit, unless the deadline passed, in which case everything is rolled
   back.

Rows carry a version counter, so a writer from another process turns the
commit into ``StaleDataError``; the unit is then retried from scratch a
bounded number of times before failing with a conflict.

Other services that must change occupancy together with their own rows
(allocation ledger, room registry, student registry) pass their work to
``execute`` and call the ``apply_*`` primitives from inside it.
"""

import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, List, Optional, Set, TypeVar

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.config.settings import settings
from app.core.exceptions import (
    ConcurrencyConflictError,
    ConflictError,
    RoomFullError,
    RoomUnderMaintenanceError,
    StudentAlreadyAssignedError,
    StudentNotAssignedError,
)
from app.core.locking import EntityLockRegistry, entity_locks, room_key, student_key
from app.models.base.enums import AllocationStatus
from app.models.room.room import Room, derive_status
from app.models.student.student import Student
from app.repositories.room.allocation_repository import AllocationRepository
from app.repositories.room.room_repository import RoomRepository
from app.repositories.student.student_repository import StudentRepository
from app.services.base.base_service import BaseService

T = TypeVar("T")


class StateChangedError(Exception):
    """The rows changed between choosing lock keys and reading them."""


@dataclass
class OccupancyResult:
    """Outcome of a coordinator operation."""

    student: Optional[Student]
    room: Optional[Room]
    previous_room: Optional[Room] = None
    removed: int = 0


class OccupancyService(BaseService[Room, RoomRepository]):
    """
    Coordinates Room and Student together on assignment changes.
    """

    def __init__(
        self,
        db_session: Session,
        locks: Optional[EntityLockRegistry] = None,
        max_retries: Optional[int] = None,
        lock_timeout: Optional[float] = None,
        deadline_seconds: Optional[float] = None,
    ):
        super().__init__(RoomRepository(db_session), db_session)
        self.rooms = self.repository
        self.students = StudentRepository(db_session)
        self.allocations = AllocationRepository(db_session)

        self.locks = locks or entity_locks
        self.max_retries = max_retries if max_retries is not None else settings.OCCUPANCY_MAX_RETRIES
        self.lock_timeout = lock_timeout if lock_timeout is not None else settings.OCCUPANCY_LOCK_TIMEOUT_SECONDS
        self.deadline_seconds = (
            deadline_seconds if deadline_seconds is not None else settings.OCCUPANCY_DEADLINE_SECONDS
        )
        self._held: Set[str] = set()

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    def execute(
        self,
        operation: str,
        lock_keys: Callable[[], Iterable[str]],
        work: Callable[[], T],
    ) -> T:
        """
        Run ``work`` under the locks named by ``lock_keys`` in one transaction.

        ``lock_keys`` is evaluated again on every attempt, outside the locks,
        from freshly read state.

        Raises:
            ConcurrencyConflictError: locks not obtained in time, or every
                attempt lost against a concurrent writer
            OperationTimeoutError: the deadline passed before commit
        """
        deadline = time.monotonic() + self.deadline_seconds

        for attempt in range(1, self.max_retries + 1):
            # Start from committed state; end the read before waiting on locks
            self.db.rollback()
            keys = set(lock_keys())
            self.db.rollback()

            try:
                with self.locks.acquire(keys, self.lock_timeout) as held:
                    self._held = set(held)
                    try:
                        with self.transactions.start(
                            operation=operation,
                            deadline=deadline,
                            timeout_seconds=self.deadline_seconds,
                        ):
                            return work()
                    finally:
                        self._held = set()
            except (StaleDataError, StateChangedError) as exc:
                self._logger.info(
                    "Occupancy write lost a race, retrying",
                    extra={
                        "operation": operation,
                        "attempt": attempt,
                        "max_retries": self.max_retries,
                        "reason": type(exc).__name__,
                    },
                )

        self._logger.warning(
            "Occupancy retries exhausted",
            extra={"operation": operation, "attempts": self.max_retries},
        )
        raise ConcurrencyConflictError(attempts=self.max_retries)

    def _require_locked(self, *keys: str) -> None:
        missing = [key for key in keys if key not in self._held]
        if missing:
            raise StateChangedError(", ".join(missing))

    def _student_lock_keys(self, student_id: str, *room_ids: Optional[str]) -> List[str]:
        """Keys for a student, its current room and any other rooms named."""
        keys = [student_key(student_id)]
        keys.extend(room_key(room_id) for room_id in room_ids if room_id)
        student = self.students.find_by_id(student_id)
        if student is not None and student.room_id:
            keys.append(room_key(student.room_id))
        return keys

    def _room_lock_keys(self, room_id: str) -> List[str]:
        """Keys for a room and everyone currently in it."""
        keys = [room_key(room_id)]
        keys.extend(student_key(student_id) for student_id in self.students.ids_in_room(room_id))
        return keys

    def room_lock_keys(self, room_id: str) -> Callable[[], List[str]]:
        return lambda: self._room_lock_keys(room_id)

    def student_lock_keys(self, student_id: str, *room_ids: Optional[str]) -> Callable[[], List[str]]:
        return lambda: self._student_lock_keys(student_id, *room_ids)

    # ------------------------------------------------------------------
    # Primitives (call only from inside ``execute``)
    # ------------------------------------------------------------------

    def load_student(self, student_id: str) -> Student:
        return self.students.get_by_id(student_id, for_update=True)

    def load_room(self, room_id: str) -> Room:
        return self.rooms.get_by_id(room_id, for_update=True)

    def recompute(self, room: Room) -> Room:
        """Set the stored counter and status of ``room`` from its occupants."""
        room.occupied_count = len(room.occupants)
        room.status = derive_status(room.capacity, room.occupied_count, room.is_under_maintenance)
        return room

    def check_assign(self, student: Student, room: Room, allow_transfer: bool = False) -> None:
        """
        Validate an assignment without writing anything.

        Raises:
            RoomUnderMaintenanceError: room is under maintenance
            StudentAlreadyAssignedError: student already in this or (without
                ``allow_transfer``) another room
            RoomFullError: no free place left
        """
        if room.is_under_maintenance:
            raise RoomUnderMaintenanceError(room.id)
        if student.room_id == room.id:
            raise StudentAlreadyAssignedError(student.id, "Student is already assigned to this room")
        if student.room_id is not None and not allow_transfer:
            raise StudentAlreadyAssignedError(student.id)
        if len(room.occupants) >= room.capacity:
            raise RoomFullError(room.id, room.capacity)

    def apply_assign(self, student: Student, room: Room, allow_transfer: bool = False) -> Optional[Room]:
        """
        Put ``student`` into ``room``.

        Returns:
            The room the student left, if this was a move
        """
        self.check_assign(student, room, allow_transfer)

        previous = student.room
        self._require_locked(student_key(student.id), room_key(room.id))
        if previous is not None:
            self.apply_remove(student, previous)

        student.room = room
        self.recompute(room)
        self.db.flush()

        self._logger.info(
            "Student assigned to room",
            extra={
                "student_id": student.id,
                "room_id": room.id,
                "occupied_count": room.occupied_count,
                "status": room.status.value,
            },
        )
        return previous

    def apply_remove(
        self,
        student: Student,
        room: Room,
        close_as: AllocationStatus = AllocationStatus.COMPLETED,
        end_date: Optional[date] = None,
    ) -> None:
        """
        Take ``student`` out of ``room`` and close their active allocations
        there.

        Raises:
            StudentNotAssignedError: student is not currently in ``room``
        """
        if student.room_id != room.id:
            raise StudentNotAssignedError(student.id, room.id)
        self._require_locked(student_key(student.id), room_key(room.id))

        self._close_allocations(student.id, room.id, close_as, end_date)

        # Load the collection so the back reference updates it in place
        room.occupants
        student.room = None
        self.recompute(room)
        self.db.flush()

        self._logger.info(
            "Student removed from room",
            extra={
                "student_id": student.id,
                "room_id": room.id,
                "occupied_count": room.occupied_count,
                "closed_as": close_as.value,
            },
        )

    def apply_vacate(self, room: Room, close_as: AllocationStatus = AllocationStatus.CANCELLED) -> int:
        """Remove every occupant of ``room``. Returns how many were removed."""
        occupants = list(room.occupants)
        for student in occupants:
            self.apply_remove(student, room, close_as=close_as)
        self.recompute(room)
        return len(occupants)

    def _close_allocations(
        self,
        student_id: str,
        room_id: str,
        close_as: AllocationStatus,
        end_date: Optional[date],
    ) -> None:
        closing_date = end_date or date.today()
        for allocation in self.allocations.find_active_for_student(student_id, room_id):
            allocation.status = close_as
            allocation.end_date = max(closing_date, allocation.start_date)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def assign(self, student_id: str, room_id: str, allow_transfer: bool = False) -> OccupancyResult:
        """
        Assign a student to a room.

        Raises:
            StudentNotFoundError / RoomNotFoundError: unknown ids
            RoomUnderMaintenanceError: room is under maintenance
            StudentAlreadyAssignedError: already placed (see ``allow_transfer``)
            RoomFullError: room at capacity
        """
        def work() -> OccupancyResult:
            student = self.load_student(student_id)
            room = self.load_room(room_id)
            previous = self.apply_assign(student, room, allow_transfer=allow_transfer)
            return OccupancyResult(student=student, room=room, previous_room=previous)

        return self.execute("assign", self.student_lock_keys(student_id, room_id), work)

    def remove(self, student_id: str, room_id: str) -> OccupancyResult:
        """
        Remove a student from the given room.

        Raises:
            StudentNotAssignedError: the student is not in that room
        """
        def work() -> OccupancyResult:
            student = self.load_student(student_id)
            room = self.load_room(room_id)
            self.apply_remove(student, room)
            return OccupancyResult(student=student, room=room, removed=1)

        return self.execute("remove", self.student_lock_keys(student_id, room_id), work)

    def transfer(self, student_id: str, from_room_id: str, to_room_id: str) -> OccupancyResult:
        """
        Move a student between rooms as a single transaction.

        If the target rejects the student the removal from the source room is
        rolled back with it.
        """
        if from_room_id == to_room_id:
            raise ConflictError("Source and target room are the same", {"room_id": to_room_id})

        def work() -> OccupancyResult:
            student = self.load_student(student_id)
            from_room = self.load_room(from_room_id)
            to_room = self.load_room(to_room_id)
            self.apply_remove(student, from_room)
            self.apply_assign(student, to_room)
            return OccupancyResult(student=student, room=to_room, previous_room=from_room)

        return self.execute(
            "transfer",
            self.student_lock_keys(student_id, from_room_id, to_room_id),
            work,
        )

    def deallocate(self, student_id: str) -> OccupancyResult:
        """
        Remove a student from whatever room they are in.

        Raises:
            StudentNotFoundError: unknown student
            StudentNotAssignedError: student has no room
        """
        def work() -> OccupancyResult:
            student = self.load_student(student_id)
            if student.room_id is None:
                raise StudentNotAssignedError(student.id, None, "Student does not have a room allocated")
            room = self.load_room(student.room_id)
            self.apply_remove(student, room)
            return OccupancyResult(student=student, room=room, removed=1)

        return self.execute("deallocate", self.student_lock_keys(student_id), work)

    def vacate(self, room_id: str) -> OccupancyResult:
        """Remove every occupant of a room, cancelling their allocations."""
        def work() -> OccupancyResult:
            room = self.load_room(room_id)
            removed = self.apply_vacate(room)
            return OccupancyResult(student=None, room=room, removed=removed)

        return self.execute("vacate", self.room_lock_keys(room_id), work)


__all__ = ["OccupancyService", "OccupancyResult", "StateChangedError"]
