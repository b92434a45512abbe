import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.config.settings import settings
from app.core.logging import user_id as user_id_var
from app.core.middleware import register_middlewares
from app.core.security import create_access_token


@pytest.fixture
def whoami_client():
    app = FastAPI()
    register_middlewares(app)

    @app.get("/whoami")
    def whoami():
        return {"user_id": user_id_var.get()}

    return TestClient(app)


def test_bearer_token_sets_user_context(whoami_client):
    token = create_access_token("user-1", "admin")
    response = whoami_client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
    assert response.json() == {"user_id": "user-1"}
    assert response.headers["X-Request-ID"]


def test_cookie_token_sets_user_context(whoami_client):
    token = create_access_token("user-2", "student")
    whoami_client.cookies.set(settings.AUTH_COOKIE_NAME, token)
    response = whoami_client.get("/whoami")
    assert response.json() == {"user_id": "user-2"}


def test_bad_token_leaves_context_empty(whoami_client):
    response = whoami_client.get("/whoami", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 200
    assert response.json() == {"user_id": None}


def test_context_does_not_leak_between_requests(whoami_client):
    token = create_access_token("user-3", "warden")
    whoami_client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
    assert whoami_client.get("/whoami").json() == {"user_id": None}
    assert user_id_var.get() is None
