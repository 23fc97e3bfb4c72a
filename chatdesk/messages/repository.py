"""Data access layer for chat messages."""

from collections import Counter

from chatdesk.db.client import get_supabase
from chatdesk.db.models import MESSAGES


def save(chat_id: str, role: str, content: str, **extra) -> dict:
    db = get_supabase()
    row = {
        "chat_id": chat_id,
        "role": role,
        "content": content,
        **extra,
    }
    result = db.table(MESSAGES).insert(row).execute()
    return result.data[0]


def list_by_chat(chat_id: str) -> list[dict]:
    db = get_supabase()
    result = db.table(MESSAGES).select("*").eq("chat_id", chat_id).order("created_at").execute()
    return result.data


def list_page(chat_id: str, page: int, per_page: int) -> tuple[list[dict], int]:
    db = get_supabase()
    offset = (page - 1) * per_page
    total = count_by_chat(chat_id)
    result = (
        db.table(MESSAGES)
        .select("*")
        .eq("chat_id", chat_id)
        .order("created_at")
        .range(offset, offset + per_page - 1)
        .execute()
    )
    return result.data, total


def count_by_chat(chat_id: str) -> int:
    db = get_supabase()
    result = db.table(MESSAGES).select("id", count="exact").eq("chat_id", chat_id).execute()
    return result.count or 0


def counts_by_chat(chat_ids: list[str]) -> dict[str, int]:
    if not chat_ids:
        return {}
    db = get_supabase()
    result = db.table(MESSAGES).select("chat_id").in_("chat_id", chat_ids).execute()
    counts = Counter(row["chat_id"] for row in result.data)
    return {chat_id: counts.get(chat_id, 0) for chat_id in chat_ids}


def list_by_chats(chat_ids: list[str], role: str | None = None) -> list[dict]:
    """Messages of several chats, oldest first."""
    if not chat_ids:
        return []
    db = get_supabase()
    query = db.table(MESSAGES).select("*").in_("chat_id", chat_ids)
    if role:
        query = query.eq("role", role)
    return query.order("created_at").execute().data


def latest_in_chat(chat_id: str) -> dict | None:
    db = get_supabase()
    result = db.table(MESSAGES).select("*").eq("chat_id", chat_id).order("created_at", desc=True).limit(1).execute()
    return result.data[0] if result.data else None


def delete_by_chats(chat_ids: list[str]) -> None:
    if not chat_ids:
        return
    db = get_supabase()
    db.table(MESSAGES).delete().in_("chat_id", chat_ids).execute()


def count() -> int:
    db = get_supabase()
    result = db.table(MESSAGES).select("id", count="exact").execute()
    return result.count or 0


def counts_by_role() -> dict[str, int]:
    db = get_supabase()
    result = db.table(MESSAGES).select("role").execute()
    return dict(Counter(row["role"] for row in result.data))


def list_created_since(since: str) -> list[dict]:
    db = get_supabase()
    result = db.table(MESSAGES).select("created_at").gte("created_at", since).order("created_at").execute()
    return result.data
