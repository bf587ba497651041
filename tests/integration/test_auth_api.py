"""HTTP tests for login, logout and the current user."""

import pytest

from tests.factories import TEST_PASSWORD


pytestmark = pytest.mark.integration


def _login(client, email, password=TEST_PASSWORD):
    return client.post("/api/auth/login", data={"username": email, "password": password})


def test_login_and_me(client, user_factory):
    user = user_factory(email="alice@example.com", name="Alice", department="Finance")

    response = _login(client, "alice@example.com")
    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["token_type"] == "bearer"

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(user.id)
    assert data["department"] == "Finance"
    assert "approvals:decide" in data["permissions"]


def test_login_wrong_password(client, user_factory):
    user_factory(email="bob@example.com")
    assert _login(client, "bob@example.com", "nope").status_code == 401
    assert _login(client, "nobody@example.com").status_code == 401


def test_login_inactive_user(client, user_factory):
    user_factory(email="gone@example.com", is_active=False)
    assert _login(client, "gone@example.com").status_code == 403


def test_logout_revokes_token(client, user_factory):
    user_factory(email="carol@example.com")
    token = _login(client, "carol@example.com").json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.post("/api/auth/logout", headers=headers).status_code == 204
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401
