"""Data access layer for chats."""

from datetime import datetime, timezone
from typing import Any

from chatdesk.db.client import get_supabase
from chatdesk.db.models import CHATS
from chatdesk.messages import repository as messages


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create(user_id: str, title: str) -> dict:
    db = get_supabase()
    result = db.table(CHATS).insert({"user_id": user_id, "title": title}).execute()
    return result.data[0]


def get_by_id(chat_id: str) -> dict | None:
    db = get_supabase()
    result = db.table(CHATS).select("*").eq("id", chat_id).execute()
    return result.data[0] if result.data else None


def list_by_user(user_id: str, order_by: str = "created_at", limit: int | None = None) -> list[dict]:
    db = get_supabase()
    query = db.table(CHATS).select("*").eq("user_id", user_id).order(order_by, desc=True)
    if limit:
        query = query.limit(limit)
    return query.execute().data


def count_by_user(user_id: str) -> int:
    db = get_supabase()
    result = db.table(CHATS).select("id", count="exact").eq("user_id", user_id).execute()
    return result.count or 0


def list_all() -> list[dict]:
    db = get_supabase()
    result = db.table(CHATS).select("*").order("updated_at", desc=True).execute()
    return result.data


def count() -> int:
    db = get_supabase()
    result = db.table(CHATS).select("id", count="exact").execute()
    return result.count or 0


def list_created_since(since: str) -> list[dict]:
    db = get_supabase()
    result = db.table(CHATS).select("created_at").gte("created_at", since).order("created_at").execute()
    return result.data


def update(chat_id: str, data: dict[str, Any]) -> dict | None:
    db = get_supabase()
    result = db.table(CHATS).update({**data, "updated_at": _now()}).eq("id", chat_id).execute()
    return result.data[0] if result.data else None


def touch(chat_id: str) -> None:
    db = get_supabase()
    db.table(CHATS).update({"updated_at": _now()}).eq("id", chat_id).execute()


def delete(chat_id: str) -> None:
    """Delete a chat after its messages."""
    messages.delete_by_chats([chat_id])
    db = get_supabase()
    db.table(CHATS).delete().eq("id", chat_id).execute()


def delete_by_user(user_id: str) -> int:
    chat_ids = [chat["id"] for chat in list_by_user(user_id)]
    messages.delete_by_chats(chat_ids)
    if chat_ids:
        db = get_supabase()
        db.table(CHATS).delete().in_("id", chat_ids).execute()
    return len(chat_ids)
