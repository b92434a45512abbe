from datetime import date

import pytest

from app.config.settings import settings

from tests.test_api_rooms import create_room, create_student

API = settings.API_V1_STR


@pytest.fixture
def setup(client, admin_headers):
    rooms = [
        create_room(client, admin_headers),
        create_room(client, admin_headers, room_number="A-102", capacity=1),
    ]
    students = [
        create_student(client, admin_headers, "Kavya Rao", "kavya@example.com"),
        create_student(client, admin_headers, "Nikhil Jain", "nikhil@example.com"),
    ]
    return rooms, students


def allocate(client, headers, student_id, room_id, **extra):
    payload = {"student_id": student_id, "room_id": room_id}
    payload.update(extra)
    return client.post(f"{API}/room-allocation/allocate", json=payload, headers=headers)


def test_allocate_returns_ledger_entry(client, warden_headers, setup):
    rooms, students = setup

    response = allocate(client, warden_headers, students[0]["id"], rooms[0]["id"], payment_status="Paid")

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["allocation"]["bed_number"] == 1
    assert data["allocation"]["status"] == "Active"
    assert data["allocation"]["payment_status"] == "Paid"
    assert data["allocation"]["start_date"] == date.today().isoformat()
    assert data["room"]["occupied_count"] == 1
    assert data["student"]["room_id"] == rooms[0]["id"]


def test_allocation_requires_staff(client, student_headers, setup):
    rooms, students = setup
    response = allocate(client, student_headers, students[0]["id"], rooms[0]["id"])
    assert response.status_code == 403


def test_allocate_twice(client, admin_headers, setup):
    rooms, students = setup
    allocate(client, admin_headers, students[0]["id"], rooms[0]["id"])

    response = allocate(client, admin_headers, students[0]["id"], rooms[1]["id"])

    assert response.status_code == 409
    assert response.json()["message"] == "Student already has a room allocated"


def test_bed_out_of_range(client, admin_headers, setup):
    rooms, students = setup
    response = allocate(client, admin_headers, students[0]["id"], rooms[1]["id"], bed_number=2)
    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_transfer_and_history(client, admin_headers, setup):
    rooms, students = setup
    student_id = students[0]["id"]
    allocate(client, admin_headers, student_id, rooms[0]["id"])

    response = client.post(
        f"{API}/room-allocation/transfer",
        json={"student_id": student_id, "from_room_id": rooms[0]["id"], "to_room_id": rooms[1]["id"]},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["room"]["status"] == "Full"
    assert data["previous_room"]["occupied_count"] == 0

    history = client.get(
        f"{API}/room-allocation/allocations", params={"student_id": student_id}, headers=admin_headers
    ).json()["data"]
    assert sorted(entry["status"] for entry in history) == ["Active", "Completed"]


def test_transfer_into_full_room(client, admin_headers, setup):
    rooms, students = setup
    allocate(client, admin_headers, students[0]["id"], rooms[0]["id"])
    allocate(client, admin_headers, students[1]["id"], rooms[1]["id"])

    response = client.post(
        f"{API}/room-allocation/transfer",
        json={"student_id": students[0]["id"], "from_room_id": rooms[0]["id"], "to_room_id": rooms[1]["id"]},
        headers=admin_headers,
    )
    assert response.status_code == 409

    view = client.get(f"{API}/room-allocation/student/{students[0]['id']}", headers=admin_headers).json()["data"]
    assert view["room"]["id"] == rooms[0]["id"]


def test_transfer_to_same_room(client, admin_headers, setup):
    rooms, students = setup
    allocate(client, admin_headers, students[0]["id"], rooms[0]["id"])

    response = client.post(
        f"{API}/room-allocation/transfer",
        json={"student_id": students[0]["id"], "from_room_id": rooms[0]["id"], "to_room_id": rooms[0]["id"]},
        headers=admin_headers,
    )
    assert response.status_code == 409


def test_deallocate(client, admin_headers, setup):
    rooms, students = setup
    allocate(client, admin_headers, students[0]["id"], rooms[0]["id"])

    response = client.post(
        f"{API}/room-allocation/deallocate", json={"student_id": students[0]["id"]}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["room"]["occupied_count"] == 0

    again = client.post(
        f"{API}/room-allocation/deallocate", json={"student_id": students[0]["id"]}, headers=admin_headers
    )
    assert again.status_code == 409


def test_release_and_payment(client, admin_headers, setup):
    rooms, students = setup
    allocation = allocate(client, admin_headers, students[0]["id"], rooms[0]["id"]).json()["data"]["allocation"]

    paid = client.put(
        f"{API}/room-allocation/allocations/{allocation['id']}/payment",
        json={"payment_status": "Partial"},
        headers=admin_headers,
    )
    assert paid.json()["data"]["payment_status"] == "Partial"

    released = client.post(
        f"{API}/room-allocation/allocations/{allocation['id']}/release",
        json={"status": "Cancelled"},
        headers=admin_headers,
    )
    assert released.status_code == 200
    assert released.json()["data"]["status"] == "Cancelled"

    again = client.post(f"{API}/room-allocation/allocations/{allocation['id']}/release", headers=admin_headers)
    assert again.status_code == 409


def test_release_with_active_status(client, admin_headers, setup):
    rooms, students = setup
    allocation = allocate(client, admin_headers, students[0]["id"], rooms[0]["id"]).json()["data"]["allocation"]

    response = client.post(
        f"{API}/room-allocation/allocations/{allocation['id']}/release",
        json={"status": "Active"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_lookup_lists(client, admin_headers, setup):
    rooms, students = setup
    allocate(client, admin_headers, students[0]["id"], rooms[1]["id"])

    free_rooms = client.get(f"{API}/room-allocation/rooms", headers=admin_headers).json()["data"]
    assert [room["id"] for room in free_rooms] == [rooms[0]["id"]]

    waiting = client.get(f"{API}/room-allocation/students", headers=admin_headers).json()["data"]
    assert [student["id"] for student in waiting] == [students[1]["id"]]


def test_student_sees_own_room(client, admin_headers, student_headers, setup):
    rooms, students = setup
    me = client.get(f"{API}/students/me", headers=student_headers).json()["data"]

    empty = client.get(f"{API}/students/me/room", headers=student_headers).json()
    assert empty["message"] == "No room allocated yet"
    assert empty["data"]["room"] is None

    allocate(client, admin_headers, students[0]["id"], rooms[0]["id"])
    allocate(client, admin_headers, me["id"], rooms[0]["id"])

    data = client.get(f"{API}/students/me/room", headers=student_headers).json()["data"]
    assert data["room"]["id"] == rooms[0]["id"]
    assert [mate["id"] for mate in data["roommates"]] == [students[0]["id"]]


def test_staff_cannot_use_student_endpoints(client, admin_headers):
    assert client.get(f"{API}/students/me", headers=admin_headers).status_code == 403
