from app.config.settings import settings

API = settings.API_V1_STR


def register_payload(**overrides):
    payload = {
        "first_name": "Meera",
        "last_name": "Iyer",
        "email": "meera@example.com",
        "password": "Adm1nPass",
        "admin_code": "let-me-in",
    }
    payload.update(overrides)
    return payload


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_register_admin_and_login(client):
    response = client.post(f"{API}/auth/register/admin", json=register_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["role"] == "admin"

    response = client.post(f"{API}/auth/login", json={"email": "meera@example.com", "password": "Adm1nPass"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "meera@example.com"
    assert settings.AUTH_COOKIE_NAME in response.cookies


def test_register_with_wrong_code(client):
    response = client.post(f"{API}/auth/register/admin", json=register_payload(admin_code="nope"))
    assert response.status_code == 403
    assert response.json() == {
        "success": False,
        "message": "Invalid admin registration code",
        "error_code": "FORBIDDEN",
    }


def test_register_duplicate_email(client):
    client.post(f"{API}/auth/register/admin", json=register_payload())
    response = client.post(f"{API}/auth/register/admin", json=register_payload())
    assert response.status_code == 409
    assert response.json()["error_code"] == "CONFLICT"


def test_register_weak_password(client):
    response = client.post(f"{API}/auth/register/admin", json=register_payload(password="short"))
    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert body["errors"]


def test_login_wrong_password(client, admin_user):
    response = client.post(f"{API}/auth/login", json={"email": "admin@example.com", "password": "wrong-one"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_with_wrong_role(client, admin_user):
    response = client.post(
        f"{API}/auth/login",
        json={"email": "admin@example.com", "password": "Passw0rd!", "role": "student"},
    )
    assert response.status_code == 403


def test_me_requires_token(client):
    response = client.get(f"{API}/auth/me")
    assert response.status_code == 401
    assert response.json()["error_code"] == "UNAUTHORIZED"


def test_me_with_garbage_token(client):
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_me_via_cookie(client, admin_user):
    login = client.post(f"{API}/auth/login", json={"email": "admin@example.com", "password": "Passw0rd!"})
    token = login.json()["data"]["access_token"]

    client.cookies.set(settings.AUTH_COOKIE_NAME, token)
    response = client.get(f"{API}/auth/me")

    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == admin_user.id


def test_student_profile_in_me(client, student_headers):
    response = client.get(f"{API}/auth/me", headers=student_headers)
    data = response.json()["data"]
    assert data["user"]["role"] == "student"
    assert data["student"]["email"] == "self@example.com"
    assert data["warden"] is None


def test_deactivated_account_is_locked_out(client, admin_headers, student_headers, db):
    me = client.get(f"{API}/auth/me", headers=student_headers).json()["data"]["user"]

    response = client.put(f"{API}/admin/users/{me['id']}/deactivate", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False

    assert client.get(f"{API}/auth/me", headers=student_headers).status_code == 401
    response = client.post(f"{API}/auth/login", json={"email": "self@example.com", "password": "secret123"})
    assert response.status_code == 401
    assert response.json()["message"] == "Account is deactivated"


def test_admin_cannot_deactivate_self(client, admin_user, admin_headers):
    response = client.put(f"{API}/admin/users/{admin_user.id}/deactivate", headers=admin_headers)
    assert response.status_code == 409


def test_logout_clears_cookie(client):
    response = client.get(f"{API}/auth/logout")
    assert response.status_code == 200
    assert response.json()["success"] is True
