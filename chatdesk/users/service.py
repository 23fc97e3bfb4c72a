"""Profile updates and per-user activity statistics."""

import calendar
import logging
from datetime import datetime, timezone

from fastapi import HTTPException

from chatdesk.auth.passwords import hash_password, verify_password
from chatdesk.chats import repository as chats
from chatdesk.db.models import ROLE_ASSISTANT, ROLE_USER
from chatdesk.messages import repository as messages
from chatdesk.users import repository
from chatdesk.utils.time_buckets import parse_timestamp, recent_months, sunday_first_weekday

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50
RECENT_CHATS = 5
MONTHS_SHOWN = 6


def get_user_or_404(user_id: str) -> dict:
    user = repository.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def update_profile(user_id: str, name: str | None, password: str | None, new_password: str | None) -> dict:
    user = get_user_or_404(user_id)
    changes = {"name": name or user.get("name")}

    if new_password:
        if not user.get("password_hash"):
            raise HTTPException(status_code=400, detail="User has no password set")
        if not password or not verify_password(password, user["password_hash"]):
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        changes["password_hash"] = hash_password(new_password)
        logger.info("User %s changed their password", user_id)

    updated = repository.update(user_id, changes)
    return repository.public_view(updated)


def _preview(content: str) -> str:
    if len(content) > PREVIEW_LENGTH:
        return content[:PREVIEW_LENGTH] + "..."
    return content


def user_stats(user_id: str, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    user_chats = chats.list_by_user(user_id)
    chat_ids = [chat["id"] for chat in user_chats]
    user_messages = messages.list_by_chats(chat_ids)

    by_hour = [0] * 24
    by_day = [0] * 7
    for message in user_messages:
        created = parse_timestamp(message["created_at"])
        by_hour[created.hour] += 1
        by_day[sunday_first_weekday(created)] += 1

    chat_dates = [parse_timestamp(chat["created_at"]) for chat in user_chats]
    chats_by_month = [
        {
            "month": calendar.month_abbr[start.month],
            "count": sum(1 for created in chat_dates if start <= created < end),
        }
        for start, end in recent_months(MONTHS_SHOWN, now)
    ]

    recent_activity = []
    for chat in chats.list_by_user(user_id, order_by="updated_at", limit=RECENT_CHATS):
        last = messages.latest_in_chat(chat["id"])
        recent_activity.append({
            "id": chat["id"],
            "title": chat["title"],
            "last_message": _preview(last["content"]) if last else "No messages",
            "updated_at": chat["updated_at"],
        })

    return {
        "total_chats": len(user_chats),
        "total_messages": len(user_messages),
        "message_distribution": {
            "user": sum(1 for m in user_messages if m["role"] == ROLE_USER),
            "assistant": sum(1 for m in user_messages if m["role"] == ROLE_ASSISTANT),
        },
        "messages_by_hour": by_hour,
        "messages_by_day": by_day,
        "chats_by_month": chats_by_month,
        "recent_activity": recent_activity,
    }
