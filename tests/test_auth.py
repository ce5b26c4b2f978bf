from conftest import PASSWORD, bearer

from venue_booking_api.app.repositories.account_repository import UserRepository


def test_register_returns_user_and_token(client):
    resp = client.post(
        "/api/v1/auth/register",
        json={"name": "  Jane Doe ", "email": "Jane@Example.com", "password": PASSWORD, "phone": "+880 1712-345678"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["name"] == "Jane Doe"
    assert body["user"]["email"] == "jane@example.com"
    assert body["token_type"] == "bearer"
    assert "password_hash" not in body["user"]

    me = client.get("/api/v1/auth/me", headers=bearer(body["token"]))
    assert me.status_code == 200
    assert me.json()["email"] == "jane@example.com"


def test_register_duplicate_email_conflicts(client, register):
    register()
    resp = client.post(
        "/api/v1/auth/register",
        json={"name": "Other", "email": "JANE@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 409
    assert resp.json() == {
        "success": False,
        "error": {"message": "An account with this email already exists"},
    }


def test_register_race_hits_unique_index(client, register, monkeypatch):
    register()
    # Simulate a concurrent request that registered between lookup and insert.
    monkeypatch.setattr(UserRepository, "find_by_email", classmethod(lambda cls, email: None))
    resp = client.post(
        "/api/v1/auth/register",
        json={"name": "Other", "email": "jane@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["message"] == "An account with this email already exists"


def test_register_rejects_weak_password(client):
    resp = client.post(
        "/api/v1/auth/register",
        json={"name": "Jane", "email": "jane@example.com", "password": "password1"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["message"] == "Validation failed"
    assert body["error"]["details"][0]["field"] == "password"


def test_login(client, register):
    register()
    resp = client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "jane@example.com"

    bad = client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": "Wr0ng!Pass"})
    assert bad.status_code == 401
    assert bad.json()["error"]["message"] == "Invalid email or password"

    unknown = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert unknown.status_code == 401


def test_me_requires_token(client):
    resp = client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Not authenticated"

    resp = client.get("/api/v1/auth/me", headers=bearer("not.a.token"))
    assert resp.status_code == 401


def test_organizer_token_cannot_use_customer_routes(client, organizer_headers):
    resp = client.get("/api/v1/auth/me", headers=organizer_headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Insufficient permissions"


def test_organizer_register_login_and_profile(client, register):
    _, headers = register(email="boss@example.com", name="Boss", organizer=True)

    login = client.post("/api/v1/admin/login", json={"email": "boss@example.com", "password": PASSWORD})
    assert login.status_code == 200
    assert login.json()["organizer"]["name"] == "Boss"

    profile = client.put("/api/v1/admin/profile", json={"name": "Big Boss", "phone": "+8801700000000"}, headers=headers)
    assert profile.status_code == 200
    assert profile.json()["name"] == "Big Boss"
    assert profile.json()["phone"] == "+8801700000000"

    assert client.get("/api/v1/admin/profile", headers=headers).json()["name"] == "Big Boss"


def test_organizer_password_change(client, register):
    _, headers = register(email="boss@example.com", name="Boss", organizer=True)

    wrong = client.put(
        "/api/v1/admin/password",
        json={"current_password": "Wr0ng!Pass", "new_password": "N3w!Password"},
        headers=headers,
    )
    assert wrong.status_code == 401
    assert wrong.json()["error"]["message"] == "Current password is incorrect"

    ok = client.put(
        "/api/v1/admin/password",
        json={"current_password": PASSWORD, "new_password": "N3w!Password"},
        headers=headers,
    )
    assert ok.status_code == 200
    assert ok.json()["success"] is True

    login = client.post("/api/v1/admin/login", json={"email": "boss@example.com", "password": "N3w!Password"})
    assert login.status_code == 200


def test_customer_token_cannot_reach_admin_routes(client, user_headers):
    assert client.get("/api/v1/admin/profile", headers=user_headers).status_code == 403
    assert client.get("/api/v1/admin/venues", headers=user_headers).status_code == 403


def test_default_organizer_is_seeded(monkeypatch):
    from fastapi.testclient import TestClient

    from venue_booking_api.app.core.config import settings
    from venue_booking_api.app.main import app

    monkeypatch.setattr(settings, "admin_email", "Admin@Example.com")
    monkeypatch.setattr(settings, "admin_password", PASSWORD)
    with TestClient(app) as client:
        resp = client.post("/api/v1/admin/login", json={"email": "admin@example.com", "password": PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["organizer"]["name"] == "Administrator"


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["database"] == "connected"
    assert body["uptime"] >= 0
