"""Cross-user management for administrators."""

import logging
import math

from fastapi import HTTPException

from chatdesk.chats import repository as chats
from chatdesk.chats.service import with_message_counts
from chatdesk.db.client import get_supabase
from chatdesk.db.models import REFRESH_TOKENS, ROLE_ADMIN, ROLE_USER
from chatdesk.messages import repository as messages
from chatdesk.users import repository as users
from chatdesk.users.service import get_user_or_404

logger = logging.getLogger(__name__)

RECENT_CHATS = 5


# --- Users ---

def list_users(search: str, sort: str, order: str, page: int, limit: int) -> dict:
    rows, total = users.list_users(search=search.strip(), sort=sort, descending=order == "desc", page=page, limit=limit)

    results = []
    for user in rows:
        chat_ids = [chat["id"] for chat in chats.list_by_user(user["id"])]
        results.append({
            **users.public_view(user),
            "chat_count": len(chat_ids),
            "message_count": sum(messages.counts_by_chat(chat_ids).values()),
        })

    return {
        "users": results,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit),
    }


def user_detail(user_id: str) -> dict:
    user = get_user_or_404(user_id)
    user_chats = chats.list_by_user(user_id)
    user_messages = messages.list_by_chats([chat["id"] for chat in user_chats])
    recent = with_message_counts(chats.list_by_user(user_id, order_by="updated_at", limit=RECENT_CHATS))

    return {
        **users.public_view(user),
        "stats": {
            "chat_count": len(user_chats),
            "message_count": len(user_messages),
            "first_activity": user_messages[0]["created_at"] if user_messages else None,
            "last_activity": user_messages[-1]["created_at"] if user_messages else None,
        },
        "recent_chats": [
            {
                "id": chat["id"],
                "title": chat["title"],
                "message_count": chat["message_count"],
                "created_at": chat["created_at"],
                "updated_at": chat["updated_at"],
            }
            for chat in recent
        ],
    }


def delete_user(user_id: str, admin_id: str) -> None:
    user = get_user_or_404(user_id)
    if user.get("role") == ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Administrators cannot be deleted")

    deleted_chats = chats.delete_by_user(user_id)
    get_supabase().table(REFRESH_TOKENS).delete().eq("user_id", user_id).execute()
    users.delete(user_id)
    logger.info("Admin %s deleted user %s (%d chats)", admin_id, user_id, deleted_chats)


# --- Chats ---

def _owners(user_ids: set[str]) -> dict[str, dict]:
    return {user_id: users.get_by_id(user_id) or {} for user_id in user_ids}


def list_all_chats() -> list[dict]:
    all_chats = with_message_counts(chats.list_all())
    owners = _owners({chat["user_id"] for chat in all_chats})
    return [
        {
            "id": chat["id"],
            "title": chat["title"],
            "user_id": chat["user_id"],
            "user_name": owners[chat["user_id"]].get("name"),
            "user_email": owners[chat["user_id"]].get("email"),
            "message_count": chat["message_count"],
            "created_at": chat["created_at"],
            "updated_at": chat["updated_at"],
        }
        for chat in all_chats
    ]


def _get_chat_or_404(chat_id: str) -> dict:
    chat = chats.get_by_id(chat_id)
    if not chat:
        raise HTTPException(status_code=404, detail="Chat not found")
    return chat


def chat_detail(chat_id: str) -> dict:
    chat = _get_chat_or_404(chat_id)
    owner = users.get_by_id(chat["user_id"])
    return {
        **chat,
        "user": {"id": owner["id"], "name": owner.get("name"), "email": owner["email"]} if owner else None,
        "messages": messages.list_by_chat(chat_id),
    }


def delete_chat(chat_id: str, admin_id: str) -> None:
    _get_chat_or_404(chat_id)
    chats.delete(chat_id)
    logger.info("Admin %s deleted chat %s", admin_id, chat_id)


# --- Top users (used by the stats view) ---

def top_users(limit: int) -> list[dict]:
    ranked = []
    for user in users.list_all():
        user_chat_ids = [chat["id"] for chat in chats.list_by_user(user["id"])]
        ranked.append((user, user_chat_ids))
    ranked.sort(key=lambda pair: len(pair[1]), reverse=True)

    return [
        {
            "id": user["id"],
            "name": user.get("name"),
            "email": user["email"],
            "chat_count": len(chat_ids),
            "message_count": len(messages.list_by_chats(chat_ids, role=ROLE_USER)),
        }
        for user, chat_ids in ranked[:limit]
    ]
