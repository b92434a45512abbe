from app.config.settings import settings

from tests.test_api_rooms import create_student

API = settings.API_V1_STR


def test_update_profile(client, admin_headers):
    student = create_student(client, admin_headers, "Ravi Kumar", "ravi@example.com")
    response = client.put(
        f"{API}/admin/students/{student['id']}",
        json={"name": "Ravi K", "phone": "+91 98765 43210"},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    assert response.json()["data"]["name"] == "Ravi K"
    assert response.json()["data"]["phone"] == "+91 98765 43210"


def test_null_for_required_field_is_rejected(client, admin_headers):
    student = create_student(client, admin_headers, "Ravi Kumar", "ravi@example.com")
    for field in ("name", "email"):
        response = client.put(f"{API}/admin/students/{student['id']}", json={field: None}, headers=admin_headers)
        assert response.status_code == 422, field
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    profile = client.get(f"{API}/admin/students/{student['id']}", headers=admin_headers).json()["data"]
    assert profile["name"] == "Ravi Kumar"
    assert profile["email"] == "ravi@example.com"


def test_optional_fields_can_be_cleared(client, admin_headers):
    student = create_student(client, admin_headers, "Ravi Kumar", "ravi@example.com")
    response = client.put(
        f"{API}/admin/students/{student['id']}",
        json={"course": None, "year": None},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    assert response.json()["data"]["course"] is None
    assert response.json()["data"]["year"] is None


def test_room_is_not_writable(client, admin_headers):
    student = create_student(client, admin_headers, "Ravi Kumar", "ravi@example.com")
    response = client.put(
        f"{API}/admin/students/{student['id']}", json={"room_id": None}, headers=admin_headers
    )
    assert response.status_code == 422
