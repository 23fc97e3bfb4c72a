"""Tests for the current-user endpoints."""

from datetime import datetime, timezone

from chatdesk.db.models import CHATS, MESSAGES
from chatdesk.users.service import user_stats


def test_me(client, user):
    resp = client.get("/api/v1/user/me", headers=user["headers"])
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["email"] == user["email"]
    assert data["name"] == "Test User"
    assert data["role"] == "user"
    assert "password_hash" not in data


def test_update_name(client, user):
    resp = client.put("/api/v1/user/profile", json={"name": "Renamed"}, headers=user["headers"])
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["name"] == "Renamed"


def test_change_password(client, user):
    resp = client.put(
        "/api/v1/user/profile",
        json={"password": user["password"], "new_password": "BrandNewPass456"},
        headers=user["headers"],
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["name"] == "Test User"

    resp = client.post("/api/v1/auth/login", json={"email": user["email"], "password": "BrandNewPass456"})
    assert resp.status_code == 200
    resp = client.post("/api/v1/auth/login", json={"email": user["email"], "password": user["password"]})
    assert resp.status_code == 401


def test_change_password_requires_current(client, user):
    resp = client.put(
        "/api/v1/user/profile",
        json={"password": "not-it", "new_password": "BrandNewPass456"},
        headers=user["headers"],
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Current password is incorrect"


def test_stats_endpoint(client, auth_header, chat_id):
    client.post("/api/v1/chats", json={"title": "Empty"}, headers=auth_header)
    client.post(f"/api/v1/chats/{chat_id}/messages", json={"message": "Hi"}, headers=auth_header)

    resp = client.get("/api/v1/user/stats", headers=auth_header)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total_chats"] == 2
    assert data["total_messages"] == 2
    assert data["message_distribution"] == {"user": 1, "assistant": 1}
    assert len(data["messages_by_hour"]) == 24
    assert sum(data["messages_by_hour"]) == 2
    assert len(data["messages_by_day"]) == 7
    assert len(data["chats_by_month"]) == 6
    assert data["chats_by_month"][-1]["count"] == 2

    activity = {a["title"]: a["last_message"] for a in data["recent_activity"]}
    assert activity["Empty"] == "No messages"
    assert activity["Friendly Greeting"] == "Hello! How can I help you today?"


def test_user_stats_buckets(fake_db):
    now = datetime(2026, 4, 10, 9, 0, tzinfo=timezone.utc)
    fake_db.tables[CHATS] = [
        {"id": "c1", "user_id": "u1", "title": "Old", "created_at": "2026-01-20T10:00:00+00:00", "updated_at": "2026-01-20T10:00:00+00:00"},
        {"id": "c2", "user_id": "u1", "title": "New", "created_at": "2026-04-05T10:00:00+00:00", "updated_at": "2026-04-05T10:00:00+00:00"},
        {"id": "c3", "user_id": "u2", "title": "Other", "created_at": "2026-04-05T10:00:00+00:00", "updated_at": "2026-04-05T10:00:00+00:00"},
    ]
    fake_db.tables[MESSAGES] = [
        # 2026-04-05 is a Sunday
        {"id": "m1", "chat_id": "c2", "role": "user", "content": "x" * 60, "created_at": "2026-04-05T14:30:00+00:00"},
        {"id": "m2", "chat_id": "c2", "role": "assistant", "content": "ok", "created_at": "2026-04-06T14:31:00+00:00"},
        {"id": "m3", "chat_id": "c3", "role": "user", "content": "not mine", "created_at": "2026-04-05T08:00:00+00:00"},
    ]

    stats = user_stats("u1", now=now)

    assert stats["total_chats"] == 2
    assert stats["total_messages"] == 2
    assert stats["messages_by_hour"][14] == 2
    assert stats["messages_by_day"][0] == 1
    assert stats["messages_by_day"][1] == 1
    assert [m["month"] for m in stats["chats_by_month"]] == ["Nov", "Dec", "Jan", "Feb", "Mar", "Apr"]
    assert [m["count"] for m in stats["chats_by_month"]] == [0, 0, 1, 0, 0, 1]
    assert stats["recent_activity"][0]["title"] == "New"
    assert stats["recent_activity"][0]["last_message"] == "ok"
    assert stats["recent_activity"][1]["last_message"] == "No messages"


def test_user_stats_preview_truncation(fake_db):
    fake_db.tables[CHATS] = [
        {"id": "c1", "user_id": "u1", "title": "Long", "created_at": "2026-04-05T10:00:00+00:00", "updated_at": "2026-04-05T10:00:00+00:00"},
    ]
    fake_db.tables[MESSAGES] = [
        {"id": "m1", "chat_id": "c1", "role": "user", "content": "y" * 60, "created_at": "2026-04-05T14:30:00+00:00"},
    ]
    preview = user_stats("u1")["recent_activity"][0]["last_message"]
    assert preview == "y" * 50 + "..."
