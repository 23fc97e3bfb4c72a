"""Pydantic schemas for the admin settings view."""

from typing import Any

from pydantic import BaseModel

API_KEY_MASK = "•" * 52


class SettingsView(BaseModel):
    api_key: str
    max_messages_per_chat: int
    max_chats_per_user: int
    maintenance_mode: bool
    allow_registrations: bool
    system_prompt: str


class SaveSettingsRequest(BaseModel):
    settings: Any = None
