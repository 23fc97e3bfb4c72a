"""Pydantic schemas for chat requests and responses."""

from pydantic import BaseModel, Field

from chatdesk.db.models import DEFAULT_CHAT_TITLE


# --- Requests ---

class CreateChatRequest(BaseModel):
    title: str = Field(default=DEFAULT_CHAT_TITLE, max_length=200)


class RenameChatRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)


# --- Responses ---

class ChatSummary(BaseModel):
    id: str
    title: str
    created_at: str
    updated_at: str
    message_count: int = 0


class ChatListResponse(BaseModel):
    status: str = "success"
    data: list[ChatSummary]
