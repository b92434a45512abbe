import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConcurrencyConflictError, OperationTimeoutError, RoomFullError
from app.core.locking import EntityLockRegistry, room_key
from app.models.room.room import Room
from app.models.student.student import Student
from app.services.room.occupancy_service import OccupancyService

from tests.test_occupancy_service import assert_consistent


def test_parallel_assigns_fill_room_exactly(session_factory, db, make_room, make_student):
    room = make_room("C-301", capacity=2)
    student_ids = [make_student().id for _ in range(6)]
    barrier = threading.Barrier(len(student_ids))

    def attempt(student_id):
        session = session_factory()
        try:
            barrier.wait()
            OccupancyService(session).assign(student_id, room.id)
            return "ok"
        except RoomFullError:
            return "full"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=len(student_ids)) as pool:
        outcomes = list(pool.map(attempt, student_ids))

    assert outcomes.count("ok") == 2
    assert outcomes.count("full") == 4

    db.expire_all()
    stored = db.get(Room, room.id)
    assert stored.occupied_count == 2
    assert len(stored.occupants) == 2
    assert_consistent(db)


def test_parallel_assigns_across_rooms(session_factory, db, make_room, make_student):
    rooms = [make_room("D-401", capacity=1), make_room("D-402", capacity=1)]
    student_ids = [make_student().id for _ in range(4)]
    jobs = [(student_id, rooms[i % 2].id) for i, student_id in enumerate(student_ids)]

    def attempt(job):
        session = session_factory()
        try:
            OccupancyService(session).assign(*job)
            return True
        except RoomFullError:
            return False
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=4) as pool:
        outcomes = list(pool.map(attempt, jobs))

    assert outcomes.count(True) == 2
    assert_consistent(db)


def test_write_from_another_process_is_retried(session_factory, make_room, make_student):
    room = make_room(capacity=2)
    first, second = make_student(), make_student()

    session_a, session_b = session_factory(), session_factory()
    mine = OccupancyService(session_a)
    # Separate registry stands in for a writer in another process
    theirs = OccupancyService(session_b, locks=EntityLockRegistry())
    attempts = []

    def work():
        target = mine.load_room(room.id)
        student = mine.load_student(first.id)
        if not attempts:
            theirs.assign(second.id, room.id)
        attempts.append(1)
        mine.apply_assign(student, target)
        return target

    try:
        result = mine.execute("assign", mine.student_lock_keys(first.id, room.id), work)
        assert len(attempts) == 2
        assert result.occupied_count == 2
    finally:
        session_a.close()
        session_b.close()


def test_stale_data_retried_until_success(db):
    occupancy = OccupancyService(db, max_retries=3)
    calls = []

    def work():
        calls.append(1)
        if len(calls) < 3:
            raise StaleDataError("version mismatch")
        return "done"

    assert occupancy.execute("noop", lambda: [], work) == "done"
    assert len(calls) == 3


def test_retries_exhausted(db):
    occupancy = OccupancyService(db, max_retries=2)
    calls = []

    def work():
        calls.append(1)
        raise StaleDataError("version mismatch")

    with pytest.raises(ConcurrencyConflictError) as exc:
        occupancy.execute("noop", lambda: [], work)
    assert len(calls) == 2
    assert exc.value.status_code == 409


def test_unlocked_entity_is_never_written(db, make_room, make_student):
    room = make_room()
    student = make_student()
    occupancy = OccupancyService(db, max_retries=2)

    def work():
        occupancy.apply_assign(occupancy.load_student(student.id), occupancy.load_room(room.id))

    with pytest.raises(ConcurrencyConflictError):
        occupancy.execute("assign", lambda: [], work)

    db.expire_all()
    assert db.get(Student, student.id).room_id is None
    assert db.get(Room, room.id).occupied_count == 0


def test_deadline_rolls_back(db, make_room, make_student):
    room = make_room()
    student = make_student()

    with pytest.raises(OperationTimeoutError) as exc:
        OccupancyService(db, deadline_seconds=0).assign(student.id, room.id)
    assert exc.value.status_code == 504

    db.expire_all()
    assert db.get(Student, student.id).room_id is None
    assert db.get(Room, room.id).occupied_count == 0


def test_lock_wait_is_bounded(db, make_room, make_student):
    room = make_room()
    student = make_student()
    locks = EntityLockRegistry()
    occupancy = OccupancyService(db, locks=locks, lock_timeout=0.05)

    with locks.acquire([room_key(room.id)], timeout=1):
        with pytest.raises(ConcurrencyConflictError):
            occupancy.assign(student.id, room.id)

    db.expire_all()
    assert db.get(Room, room.id).occupied_count == 0


def test_locks_are_released_after_failure(db, make_room, make_student):
    room = make_room(capacity=1)
    first, second = make_student(), make_student()
    locks = EntityLockRegistry()
    occupancy = OccupancyService(db, locks=locks, lock_timeout=0.05)
    occupancy.assign(first.id, room.id)

    with pytest.raises(RoomFullError):
        occupancy.assign(second.id, room.id)

    # Would time out if the failed attempt had kept its locks
    occupancy.remove(first.id, room.id)
    occupancy.assign(second.id, room.id)


def test_registry_forgets_idle_keys(db, make_room, make_student):
    locks = EntityLockRegistry()
    occupancy = OccupancyService(db, locks=locks)
    for n in range(5):
        student = make_student()
        room = make_room(room_number=f"A-2{n}0")
        occupancy.assign(student.id, room.id)
        occupancy.remove(student.id, room.id)

    assert len(locks) == 0


def test_registry_keeps_key_while_held_or_awaited():
    locks = EntityLockRegistry()

    with locks.acquire(["room:1", "student:1"], timeout=1):
        assert len(locks) == 2
        with pytest.raises(ConcurrencyConflictError):
            with locks.acquire(["room:1", "room:2"], timeout=0.05):
                pass
        assert len(locks) == 2

    assert len(locks) == 0
