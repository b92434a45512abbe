import pytest

from app.core.exceptions import DuplicateEntryError, ValidationError
from app.models.base.enums import Block, RoomType
from app.models.room.room import Room
from app.repositories.room.room_repository import RoomRepository


def new_room(**overrides):
    values = {
        "block": Block.A,
        "room_number": "A-101",
        "room_code": "RM-A-101",
        "capacity": 2,
        "room_type": RoomType.NON_AC_BOYS,
        "description": "Plain room",
    }
    values.update(overrides)
    return Room(**values)


def test_unique_collision_is_a_conflict(db):
    rooms = RoomRepository(db)
    rooms.create(new_room(), commit=True)

    with pytest.raises(DuplicateEntryError):
        rooms.create(new_room(room_code="RM-A-101-B"))


def test_missing_required_column_is_not_a_conflict(db):
    with pytest.raises(ValidationError) as exc_info:
        RoomRepository(db).create(new_room(description=None))

    assert exc_info.value.status_code == 422
    assert "already exists" not in exc_info.value.message


def test_check_constraint_is_not_a_conflict(db):
    with pytest.raises(ValidationError):
        RoomRepository(db).create(new_room(capacity=9), commit=True)


def test_update_to_null_is_not_a_conflict(db):
    rooms = RoomRepository(db)
    room = rooms.create(new_room(), commit=True)

    with pytest.raises(ValidationError):
        rooms.update(room, {"capacity": None})
