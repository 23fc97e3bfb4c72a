"""Translate between the admin settings view and stored setting rows."""

import logging
from typing import Any

from fastapi import HTTPException

from chatdesk.runtime_settings import store
from chatdesk.runtime_settings.schemas import API_KEY_MASK, SettingsView

logger = logging.getLogger(__name__)

# View field -> setting name
FIELD_TO_SETTING = {
    "api_key": store.LLM_API_KEY,
    "max_messages_per_chat": store.MAX_MESSAGES_PER_CHAT,
    "max_chats_per_user": store.MAX_CHATS_PER_USER,
    "maintenance_mode": store.MAINTENANCE_MODE,
    "allow_registrations": store.ALLOW_REGISTRATIONS,
    "system_prompt": store.SYSTEM_PROMPT,
}


def _parse_int(raw: str | None, default: str) -> int:
    try:
        return int(raw or default)
    except ValueError:
        return int(default)


def get_settings_view() -> SettingsView:
    values = store.get_all()
    defaults = store.DEFAULTS
    return SettingsView(
        api_key=API_KEY_MASK if values.get(store.LLM_API_KEY) else "",
        max_messages_per_chat=_parse_int(values.get(store.MAX_MESSAGES_PER_CHAT), defaults[store.MAX_MESSAGES_PER_CHAT]),
        max_chats_per_user=_parse_int(values.get(store.MAX_CHATS_PER_USER), defaults[store.MAX_CHATS_PER_USER]),
        maintenance_mode=values.get(store.MAINTENANCE_MODE) == "true",
        allow_registrations=values.get(store.ALLOW_REGISTRATIONS) == "true",
        system_prompt=values.get(store.SYSTEM_PROMPT) or store.DEFAULT_SYSTEM_PROMPT,
    )


def _to_setting_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def save_settings(payload: Any) -> list[str]:
    """Upsert every recognised field. Returns the setting names written."""
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid settings format")

    written = []
    for field, value in payload.items():
        name = FIELD_TO_SETTING.get(field)
        if name is None:
            continue
        db_value = _to_setting_value(value)
        # The masked key comes back unchanged from the view
        if name == store.LLM_API_KEY and "••••" in db_value:
            continue
        store.set_value(name, db_value)
        written.append(name)

    logger.info("Saved settings: %s", ", ".join(written) or "none")
    return written
