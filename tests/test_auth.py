"""Tests for auth endpoints."""

import uuid

from chatdesk.db.models import SETTINGS


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_register(client, fake_db):
    email = f"reg_{uuid.uuid4().hex[:8]}@example.com"
    resp = client.post("/api/v1/auth/register", json={"email": email, "password": "TestPass123", "name": "Ana"})
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"

    stored = fake_db.rows("users")[0]
    assert stored["name"] == "Ana"
    assert stored["role"] == "user"
    assert stored["password_hash"] != "TestPass123"


def test_register_duplicate(client, user):
    resp = client.post("/api/v1/auth/register", json={"email": user["email"], "password": "TestPass123"})
    assert resp.status_code == 409
    assert resp.json()["error"]["type"] == "conflict"


def test_register_disabled_by_setting(client, fake_db):
    fake_db.tables[SETTINGS] = [{"id": "1", "name": "allow_registrations", "value": "false"}]
    resp = client.post("/api/v1/auth/register", json={"email": "late@example.com", "password": "TestPass123"})
    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Registrations are disabled"


def test_login_success(client, user):
    resp = client.post("/api/v1/auth/login", json={"email": user["email"], "password": user["password"]})
    assert resp.status_code == 200
    assert "access_token" in resp.json()["data"]


def test_login_wrong_password(client, user):
    resp = client.post("/api/v1/auth/login", json={"email": user["email"], "password": "WrongPass"})
    assert resp.status_code == 401


def test_login_nonexistent_user(client):
    resp = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "x"})
    assert resp.status_code == 401


def test_refresh_token(client, user):
    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": user["tokens"]["refresh_token"]})
    assert resp.status_code == 200
    assert "access_token" in resp.json()["data"]


def test_refresh_revoked_token(client, user):
    refresh = user["tokens"]["refresh_token"]
    client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})

    # Second use of the same token is rejected
    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
    assert resp.status_code == 401


def test_refresh_rejects_access_token(client, user):
    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": user["tokens"]["access_token"]})
    assert resp.status_code == 401


def test_logout(client, user):
    resp = client.post(
        "/api/v1/auth/logout",
        json={"refresh_token": user["tokens"]["refresh_token"]},
        headers=user["headers"],
    )
    assert resp.status_code == 200

    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": user["tokens"]["refresh_token"]})
    assert resp.status_code == 401


def test_missing_auth(client):
    resp = client.post("/api/v1/auth/logout", json={"refresh_token": "x"})
    assert resp.status_code == 401
    body = resp.json()
    assert body["status"] == "error"
    assert body["error"]["type"] == "authentication_error"


def test_invalid_token(client):
    resp = client.get("/api/v1/chats", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
