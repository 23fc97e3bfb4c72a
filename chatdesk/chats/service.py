"""Business logic for chats with ownership verification."""

import logging

from fastapi import HTTPException

from chatdesk.auth.dependencies import CurrentUser
from chatdesk.chats import repository
from chatdesk.db.models import DEFAULT_CHAT_TITLE
from chatdesk.messages import repository as messages
from chatdesk.runtime_settings import store

logger = logging.getLogger(__name__)


def verify_ownership(chat: dict, user_id: str) -> None:
    if chat["user_id"] != user_id:
        raise HTTPException(status_code=403, detail="You do not have access to this chat")


def get_owned_chat(chat_id: str, user_id: str) -> dict:
    chat = repository.get_by_id(chat_id)
    if not chat:
        raise HTTPException(status_code=404, detail="Chat not found")
    verify_ownership(chat, user_id)
    return chat


def with_message_counts(chats: list[dict]) -> list[dict]:
    counts = messages.counts_by_chat([chat["id"] for chat in chats])
    return [{**chat, "message_count": counts.get(chat["id"], 0)} for chat in chats]


def list_chats(user_id: str) -> list[dict]:
    return with_message_counts(repository.list_by_user(user_id))


def create_chat(user: CurrentUser, title: str) -> dict:
    if not user.is_admin:
        limit = store.get_int(store.MAX_CHATS_PER_USER)
        if repository.count_by_user(user.id) >= limit:
            raise HTTPException(status_code=403, detail=f"Chat limit reached ({limit} chats per user)")
    chat = repository.create(user.id, title.strip() or DEFAULT_CHAT_TITLE)
    logger.info("User %s created chat %s", user.id, chat["id"])
    return {**chat, "message_count": 0}


def get_chat(chat_id: str, user_id: str) -> dict:
    chat = get_owned_chat(chat_id, user_id)
    return {**chat, "messages": messages.list_by_chat(chat_id)}


def rename_chat(chat_id: str, user_id: str, title: str) -> dict:
    get_owned_chat(chat_id, user_id)
    title = title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")
    return repository.update(chat_id, {"title": title})


def delete_chat(chat_id: str, user_id: str) -> None:
    get_owned_chat(chat_id, user_id)
    repository.delete(chat_id)
    logger.info("User %s deleted chat %s", user_id, chat_id)
