"""Data access layer for users."""

from datetime import datetime, timezone
from typing import Any

from chatdesk.db.client import get_supabase
from chatdesk.db.models import USERS

PUBLIC_FIELDS = ("id", "name", "email", "role", "image", "created_at", "updated_at")


def public_view(user: dict) -> dict:
    """Strip credentials from a user row."""
    return {field: user.get(field) for field in PUBLIC_FIELDS}


def get_by_id(user_id: str) -> dict | None:
    db = get_supabase()
    result = db.table(USERS).select("*").eq("id", user_id).execute()
    return result.data[0] if result.data else None


def get_by_email(email: str) -> dict | None:
    db = get_supabase()
    result = db.table(USERS).select("*").eq("email", email).execute()
    return result.data[0] if result.data else None


def create(data: dict[str, Any]) -> dict:
    db = get_supabase()
    result = db.table(USERS).insert(data).execute()
    return result.data[0]


def update(user_id: str, data: dict[str, Any]) -> dict | None:
    db = get_supabase()
    data = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
    result = db.table(USERS).update(data).eq("id", user_id).execute()
    return result.data[0] if result.data else None


def delete(user_id: str) -> bool:
    db = get_supabase()
    result = db.table(USERS).delete().eq("id", user_id).execute()
    return bool(result.data)


def count() -> int:
    db = get_supabase()
    result = db.table(USERS).select("id", count="exact").execute()
    return result.count or 0


def _search_filter(search: str) -> str:
    # PostgREST or-filters are comma/paren delimited
    term = "".join(ch for ch in search if ch not in ",()")
    return f"name.ilike.%{term}%,email.ilike.%{term}%"


def list_users(
    search: str = "",
    sort: str = "created_at",
    descending: bool = True,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[dict], int]:
    db = get_supabase()
    offset = (page - 1) * limit

    count_query = db.table(USERS).select("id", count="exact")
    query = db.table(USERS).select("*")
    if search:
        count_query = count_query.or_(_search_filter(search))
        query = query.or_(_search_filter(search))

    total = count_query.execute().count or 0
    result = query.order(sort, desc=descending).range(offset, offset + limit - 1).execute()
    return result.data, total


def list_created_since(since: str) -> list[dict]:
    db = get_supabase()
    result = db.table(USERS).select("created_at").gte("created_at", since).order("created_at").execute()
    return result.data


def list_all() -> list[dict]:
    db = get_supabase()
    result = db.table(USERS).select("*").execute()
    return result.data
