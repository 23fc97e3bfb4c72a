"""Shared test fixtures."""

import os
import uuid

os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from chatdesk.config.settings import get_settings
from chatdesk.db import client as db_client
from chatdesk.db.models import ROLE_ADMIN, USERS
from chatdesk.main import app
from chatdesk.messages import service as message_service
from fakes import FakeLLMClient, FakeSupabase


@pytest.fixture(autouse=True)
def fake_db(monkeypatch):
    db = FakeSupabase()
    monkeypatch.setattr(db_client, "_client", db)
    return db


@pytest.fixture(autouse=True)
def fake_llm(monkeypatch):
    llm = FakeLLMClient()
    requested = []

    def _get_llm_client(provider, api_key):
        requested.append((provider, api_key))
        return llm

    llm.requested = requested
    monkeypatch.setattr(message_service, "get_llm_client", _get_llm_client)
    return llm


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    """The cached settings object; attributes can be patched per test."""
    current = get_settings()
    monkeypatch.setattr(current, "GOOGLE_AI_API_KEY", "")
    return current


@pytest.fixture
def client():
    return TestClient(app)


def register(client, email=None, password="SecureTestPass123", name="Test User") -> dict:
    email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
    resp = client.post("/api/v1/auth/register", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201, resp.text
    tokens = resp.json()["data"]
    return {
        "email": email,
        "password": password,
        "tokens": tokens,
        "headers": {"Authorization": f"Bearer {tokens['access_token']}"},
    }


@pytest.fixture
def make_user(client):
    def _make(**kwargs):
        return register(client, **kwargs)
    return _make


@pytest.fixture
def user(client):
    return register(client)


@pytest.fixture
def auth_header(user):
    return user["headers"]


@pytest.fixture
def admin(client, fake_db):
    account = register(client, name="Admin")
    for row in fake_db.rows(USERS):
        if row["email"] == account["email"]:
            row["role"] = ROLE_ADMIN
    # Log in again so the access token carries the admin role
    resp = client.post("/api/v1/auth/login", json={"email": account["email"], "password": account["password"]})
    account["headers"] = {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}
    return account


@pytest.fixture
def admin_header(admin):
    return admin["headers"]


@pytest.fixture
def chat_id(client, auth_header):
    resp = client.post("/api/v1/chats", json={"title": "Test Chat"}, headers=auth_header)
    assert resp.status_code == 201
    return resp.json()["data"]["id"]
