from app.config.settings import settings

API = settings.API_V1_STR


def room_payload(**overrides):
    payload = {
        "block": "A",
        "room_number": "A-101",
        "floor": "1st Floor",
        "capacity": 2,
        "room_type": "AC Room - Boys",
        "facilities": ["Fan", "Study Table"],
        "description": "Corner room facing the garden",
        "price": "5500.00",
        "price_period": "month",
    }
    payload.update(overrides)
    return payload


def create_room(client, headers, **overrides):
    response = client.post(f"{API}/rooms", json=room_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_student(client, headers, name, email):
    response = client.post(
        f"{API}/admin/students",
        json={"name": name, "email": email, "password": "secret123", "course": "BSc", "year": 1},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestRoomRegistry:
    def test_create_and_read(self, client, admin_headers):
        room = create_room(client, admin_headers)

        assert room["room_code"] == "RM-A-101"
        assert room["status"] == "Available"
        assert room["occupied_count"] == 0
        assert room["available_beds"] == 2
        assert room["occupants"] == []

        response = client.get(f"{API}/rooms/{room['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["room_number"] == "A-101"

    def test_warden_can_create(self, client, warden_headers):
        create_room(client, warden_headers)

    def test_student_cannot_create(self, client, student_headers):
        response = client.post(f"{API}/rooms", json=room_payload(), headers=student_headers)
        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN"

    def test_anonymous_cannot_create(self, client):
        response = client.post(f"{API}/rooms", json=room_payload())
        assert response.status_code == 401

    def test_room_number_must_match_block(self, client, admin_headers):
        response = client.post(f"{API}/rooms", json=room_payload(block="B"), headers=admin_headers)
        assert response.status_code == 422

    def test_duplicate_room(self, client, admin_headers):
        create_room(client, admin_headers)
        response = client.post(f"{API}/rooms", json=room_payload(), headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["message"] == "Room number already exists in this block."

    def test_occupancy_fields_are_read_only(self, client, admin_headers):
        room = create_room(client, admin_headers)
        for field, value in (("status", "Full"), ("occupied_count", 2)):
            response = client.put(f"{API}/rooms/{room['id']}", json={field: value}, headers=admin_headers)
            assert response.status_code == 422

    def test_null_for_required_field_is_rejected(self, client, admin_headers):
        room = create_room(client, admin_headers)
        for field in ("capacity", "description", "block", "room_number", "room_type"):
            response = client.put(f"{API}/rooms/{room['id']}", json={field: None}, headers=admin_headers)
            assert response.status_code == 422, field
            assert response.json()["error_code"] == "VALIDATION_ERROR"

        unchanged = client.get(f"{API}/rooms/{room['id']}").json()["data"]
        assert unchanged["capacity"] == 2
        assert unchanged["description"] == "Corner room facing the garden"

    def test_optional_fields_can_be_cleared(self, client, admin_headers):
        room = create_room(client, admin_headers, image_url="https://example.com/a101.jpg")
        response = client.put(
            f"{API}/rooms/{room['id']}",
            json={"floor": None, "price": None, "image_url": None},
            headers=admin_headers,
        )
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert data["floor"] is None
        assert data["price"] is None
        assert data["image_url"] is None

    def test_unknown_room(self, client):
        response = client.get(f"{API}/rooms/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Room not found", "error_code": "NOT_FOUND"}

    def test_list_filters(self, client, admin_headers):
        create_room(client, admin_headers)
        create_room(client, admin_headers, block="B", room_number="B-201", is_under_maintenance=True)

        everything = client.get(f"{API}/rooms").json()["data"]
        assert len(everything) == 2

        maintenance = client.get(f"{API}/rooms", params={"status": "Maintenance"}).json()["data"]
        assert [room["room_number"] for room in maintenance] == ["B-201"]

        block_a = client.get(f"{API}/rooms", params={"block": "A", "has_vacancy": "true"}).json()["data"]
        assert [room["room_number"] for room in block_a] == ["A-101"]

    def test_block_summary(self, client, admin_headers):
        create_room(client, admin_headers)
        response = client.get(f"{API}/rooms/blocks/summary")
        assert response.status_code == 200
        summary = {entry["block"]: entry for entry in response.json()["data"]}
        assert summary["A"]["total_rooms"] == 1
        assert summary["A"]["total_beds"] == 2
        assert summary["C"]["total_rooms"] == 0


class TestRoomOccupancy:
    def test_assign_until_full(self, client, admin_headers):
        room = create_room(client, admin_headers)
        ids = [
            create_student(client, admin_headers, f"Student {n}", f"s{n}@example.com")["id"]
            for n in range(3)
        ]

        first = client.post(f"{API}/rooms/{room['id']}/assign", json={"student_id": ids[0]}, headers=admin_headers)
        assert first.status_code == 200
        assert first.json()["data"]["room"]["occupied_count"] == 1
        assert first.json()["data"]["student"]["room_id"] == room["id"]

        second = client.post(f"{API}/rooms/{room['id']}/assign", json={"student_id": ids[1]}, headers=admin_headers)
        assert second.json()["data"]["room"]["status"] == "Full"

        third = client.post(f"{API}/rooms/{room['id']}/assign", json={"student_id": ids[2]}, headers=admin_headers)
        assert third.status_code == 409
        assert third.json()["message"] == "Room is full"

        detail = client.get(f"{API}/rooms/{room['id']}").json()["data"]
        assert sorted(o["id"] for o in detail["occupants"]) == sorted(ids[:2])

    def test_remove_and_remove_again(self, client, admin_headers):
        room = create_room(client, admin_headers)
        student = create_student(client, admin_headers, "Ravi Kumar", "ravi@example.com")
        client.post(f"{API}/rooms/{room['id']}/assign", json={"student_id": student["id"]}, headers=admin_headers)

        removed = client.post(
            f"{API}/rooms/{room['id']}/remove", json={"student_id": student["id"]}, headers=admin_headers
        )
        assert removed.status_code == 200
        assert removed.json()["data"]["room"]["occupied_count"] == 0

        again = client.post(
            f"{API}/rooms/{room['id']}/remove", json={"student_id": student["id"]}, headers=admin_headers
        )
        assert again.status_code == 409

    def test_assign_into_maintenance(self, client, admin_headers):
        room = create_room(client, admin_headers, is_under_maintenance=True)
        student = create_student(client, admin_headers, "Ravi Kumar", "ravi@example.com")

        response = client.post(
            f"{API}/rooms/{room['id']}/assign", json={"student_id": student["id"]}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_STATE"

    def test_maintenance_toggle_vacates(self, client, admin_headers):
        room = create_room(client, admin_headers)
        student = create_student(client, admin_headers, "Ravi Kumar", "ravi@example.com")
        client.post(f"{API}/rooms/{room['id']}/assign", json={"student_id": student["id"]}, headers=admin_headers)

        response = client.put(f"{API}/rooms/{room['id']}", json={"is_under_maintenance": True}, headers=admin_headers)
        data = response.json()["data"]
        assert data["status"] == "Maintenance"
        assert data["occupants"] == []

        profile = client.get(f"{API}/admin/students/{student['id']}", headers=admin_headers).json()["data"]
        assert profile["room_id"] is None

    def test_capacity_below_occupancy(self, client, admin_headers):
        room = create_room(client, admin_headers)
        for n in range(2):
            student = create_student(client, admin_headers, f"Student {n}", f"s{n}@example.com")
            client.post(
                f"{API}/rooms/{room['id']}/assign", json={"student_id": student["id"]}, headers=admin_headers
            )

        response = client.put(f"{API}/rooms/{room['id']}", json={"capacity": 1}, headers=admin_headers)
        assert response.status_code == 409

    def test_delete_room(self, client, admin_headers):
        room = create_room(client, admin_headers)
        student = create_student(client, admin_headers, "Ravi Kumar", "ravi@example.com")
        client.post(f"{API}/rooms/{room['id']}/assign", json={"student_id": student["id"]}, headers=admin_headers)

        response = client.delete(f"{API}/rooms/{room['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"] == {"students_removed": 1}

        assert client.get(f"{API}/rooms/{room['id']}").status_code == 404
        profile = client.get(f"{API}/admin/students/{student['id']}", headers=admin_headers).json()["data"]
        assert profile["room_id"] is None
