"""
Shared fixtures.

Every test gets its own SQLite file, so sessions opened from different
threads see the same committed state.
"""

import os
import tempfile

_SCRATCH = tempfile.mkdtemp(prefix="hostel-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_SCRATCH}/default.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["PASSWORD_BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_REGISTRATION_CODE"] = "let-me-in"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-1234"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.security import create_access_token, hash_password  # noqa: E402
from app.db.init_db import drop_db, init_db  # noqa: E402
from app.db.session import build_engine, build_session_factory, get_db  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.models.base.enums import RoomType, UserRole  # noqa: E402
from app.models.user.user import User  # noqa: E402
from app.schemas.room import RoomCreate  # noqa: E402
from app.schemas.student import StudentCreate  # noqa: E402
from app.services.room.room_service import RoomService  # noqa: E402
from app.services.student.student_service import StudentService  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'hostel.db'}")
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


# --- Factories ------------------------------------------------------------------

@pytest.fixture
def make_room(db):
    def _make(room_number="A-101", capacity=2, **overrides):
        payload = {
            "block": room_number[0],
            "room_number": room_number,
            "capacity": capacity,
            "room_type": RoomType.NON_AC_BOYS,
            "description": f"Room {room_number}",
        }
        payload.update(overrides)
        return RoomService(db).create(RoomCreate(**payload))

    return _make


@pytest.fixture
def make_student(db):
    counter = {"n": 0}

    def _make(name=None, email=None, password="secret123"):
        counter["n"] += 1
        n = counter["n"]
        return StudentService(db).create(
            StudentCreate(
                name=name or f"Student {n:02d}",
                email=email or f"student{n}@example.com",
                password=password,
                course="B.Tech",
                year=2,
            )
        )

    return _make


def _make_staff(db, role: UserRole, email: str) -> User:
    user = User(
        email=email,
        first_name=role.value.title(),
        password_hash=hash_password("Passw0rd!"),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def admin_user(db):
    return _make_staff(db, UserRole.ADMIN, "admin@example.com")


@pytest.fixture
def warden_user(db):
    return _make_staff(db, UserRole.WARDEN, "warden@example.com")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role.value)}"}


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def warden_headers(warden_user):
    return auth_headers(warden_user)


@pytest.fixture
def student_headers(db, make_student):
    student = make_student(name="Self Service", email="self@example.com")
    return auth_headers(student.user)
