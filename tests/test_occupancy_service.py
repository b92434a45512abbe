import pytest

from app.core.exceptions import (
    ConflictError,
    RoomFullError,
    RoomNotFoundError,
    RoomUnderMaintenanceError,
    StudentAlreadyAssignedError,
    StudentNotAssignedError,
    StudentNotFoundError,
)
from app.models.base.enums import RoomStatus
from app.models.room.room import Room, derive_status
from app.models.student.student import Student
from app.services.room.occupancy_service import OccupancyService


def assert_consistent(db):
    """Stored counters agree with membership, and membership agrees with room_id."""
    db.expire_all()
    for room in db.query(Room).all():
        members = db.query(Student).filter(Student.room_id == room.id).count()
        assert room.occupied_count == members
        assert 0 <= room.occupied_count <= room.capacity
        assert room.status == derive_status(room.capacity, room.occupied_count, room.is_under_maintenance)


class TestDeriveStatus:
    def test_available_below_capacity(self):
        assert derive_status(2, 1, False) == RoomStatus.AVAILABLE

    def test_full_at_capacity(self):
        assert derive_status(2, 2, False) == RoomStatus.FULL

    def test_maintenance_wins(self):
        assert derive_status(2, 0, True) == RoomStatus.MAINTENANCE
        assert derive_status(2, 2, True) == RoomStatus.MAINTENANCE


class TestAssign:
    def test_two_students_fill_a_double_room(self, db, make_room, make_student):
        room = make_room("A-101", capacity=2)
        s1, s2, s3 = make_student(), make_student(), make_student()
        occupancy = OccupancyService(db)

        result = occupancy.assign(s1.id, room.id)
        assert result.room.occupied_count == 1
        assert result.room.status == RoomStatus.AVAILABLE
        assert result.student.room_id == room.id

        result = occupancy.assign(s2.id, room.id)
        assert result.room.occupied_count == 2
        assert result.room.status == RoomStatus.FULL

        with pytest.raises(RoomFullError):
            occupancy.assign(s3.id, room.id)

        db.expire_all()
        assert db.get(Student, s3.id).room_id is None
        assert_consistent(db)

    def test_assign_same_room_twice_is_rejected(self, db, make_room, make_student):
        room = make_room()
        student = make_student()
        occupancy = OccupancyService(db)
        occupancy.assign(student.id, room.id)

        with pytest.raises(StudentAlreadyAssignedError) as exc:
            occupancy.assign(student.id, room.id)
        assert "this room" in exc.value.message

        db.expire_all()
        assert db.get(Room, room.id).occupied_count == 1

    def test_assign_student_placed_elsewhere_is_rejected(self, db, make_room, make_student):
        first, second = make_room("A-101"), make_room("A-102")
        student = make_student()
        occupancy = OccupancyService(db)
        occupancy.assign(student.id, first.id)

        with pytest.raises(StudentAlreadyAssignedError):
            occupancy.assign(student.id, second.id)
        assert_consistent(db)

    def test_assign_with_transfer_moves_the_student(self, db, make_room, make_student):
        first, second = make_room("A-101"), make_room("A-102")
        student = make_student()
        occupancy = OccupancyService(db)
        occupancy.assign(student.id, first.id)

        result = occupancy.assign(student.id, second.id, allow_transfer=True)

        assert result.previous_room.id == first.id
        assert result.previous_room.occupied_count == 0
        assert result.room.occupied_count == 1
        assert_consistent(db)

    def test_assign_into_maintenance_room(self, db, make_room, make_student):
        room = make_room(is_under_maintenance=True)
        student = make_student()

        with pytest.raises(RoomUnderMaintenanceError) as exc:
            OccupancyService(db).assign(student.id, room.id)
        assert exc.value.status_code == 400

    def test_unknown_ids(self, db, make_room, make_student):
        room = make_room()
        student = make_student()
        occupancy = OccupancyService(db)

        with pytest.raises(StudentNotFoundError):
            occupancy.assign("missing", room.id)
        with pytest.raises(RoomNotFoundError):
            occupancy.assign(student.id, "missing")


class TestRemove:
    def test_remove_frees_the_bed(self, db, make_room, make_student):
        room = make_room(capacity=1)
        student = make_student()
        occupancy = OccupancyService(db)
        occupancy.assign(student.id, room.id)

        result = occupancy.remove(student.id, room.id)

        assert result.room.occupied_count == 0
        assert result.room.status == RoomStatus.AVAILABLE
        assert result.student.room_id is None
        assert_consistent(db)

    def test_second_remove_changes_nothing(self, db, make_room, make_student):
        room = make_room()
        student = make_student()
        occupancy = OccupancyService(db)
        occupancy.assign(student.id, room.id)
        occupancy.remove(student.id, room.id)

        with pytest.raises(StudentNotAssignedError):
            occupancy.remove(student.id, room.id)

        db.expire_all()
        assert db.get(Room, room.id).occupied_count == 0

    def test_deallocate_without_room(self, db, make_student):
        student = make_student()
        with pytest.raises(StudentNotAssignedError):
            OccupancyService(db).deallocate(student.id)

    def test_deallocate_uses_current_room(self, db, make_room, make_student):
        room = make_room()
        student = make_student()
        occupancy = OccupancyService(db)
        occupancy.assign(student.id, room.id)

        result = occupancy.deallocate(student.id)

        assert result.room.id == room.id
        assert result.removed == 1
        assert_consistent(db)


class TestTransfer:
    def test_transfer_moves_between_rooms(self, db, make_room, make_student):
        source, target = make_room("B-201", capacity=2), make_room("B-202", capacity=2)
        student = make_student()
        occupancy = OccupancyService(db)
        occupancy.assign(student.id, source.id)

        result = occupancy.transfer(student.id, source.id, target.id)

        assert result.student.room_id == target.id
        assert result.previous_room.occupied_count == 0
        assert result.room.occupied_count == 1
        assert_consistent(db)

    def test_transfer_into_full_room_changes_nothing(self, db, make_room, make_student):
        source, target = make_room("B-201", capacity=2), make_room("B-202", capacity=1)
        mover, blocker = make_student(), make_student()
        occupancy = OccupancyService(db)
        occupancy.assign(mover.id, source.id)
        occupancy.assign(blocker.id, target.id)

        with pytest.raises(RoomFullError):
            occupancy.transfer(mover.id, source.id, target.id)

        db.expire_all()
        assert db.get(Student, mover.id).room_id == source.id
        assert db.get(Room, source.id).occupied_count == 1
        assert db.get(Room, target.id).occupied_count == 1
        assert_consistent(db)

    def test_transfer_from_wrong_room(self, db, make_room, make_student):
        source, target = make_room("B-201"), make_room("B-202")
        student = make_student()

        with pytest.raises(StudentNotAssignedError):
            OccupancyService(db).transfer(student.id, source.id, target.id)

    def test_transfer_to_same_room(self, db, make_room, make_student):
        room = make_room()
        student = make_student()
        with pytest.raises(ConflictError):
            OccupancyService(db).transfer(student.id, room.id, room.id)


class TestVacate:
    def test_vacate_removes_everyone(self, db, make_room, make_student):
        room = make_room(capacity=3)
        students = [make_student() for _ in range(3)]
        occupancy = OccupancyService(db)
        for student in students:
            occupancy.assign(student.id, room.id)

        result = occupancy.vacate(room.id)

        assert result.removed == 3
        assert result.room.occupied_count == 0
        assert result.room.status == RoomStatus.AVAILABLE
        assert_consistent(db)
