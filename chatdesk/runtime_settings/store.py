"""Key/value settings table read at request time.

Rows are plain ``(name, value)`` strings. Admin saves use check-then-update-or-insert,
while the sync operation upserts the API key from the environment and seeds every
other default only when the row is missing.
"""

import logging

from chatdesk.config.settings import get_settings
from chatdesk.db.client import get_supabase
from chatdesk.db.models import SETTINGS

logger = logging.getLogger(__name__)

# Setting names
LLM_API_KEY = "llm_api_key"
MAX_MESSAGES_PER_CHAT = "max_messages_per_chat"
MAX_CHATS_PER_USER = "max_chats_per_user"
MAINTENANCE_MODE = "maintenance_mode"
ALLOW_REGISTRATIONS = "allow_registrations"
SYSTEM_PROMPT = "system_prompt"

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful, respectful and honest AI assistant. Always answer as helpfully "
    "as possible while keeping your answers accurate and factual."
)

DEFAULTS: dict[str, str] = {
    MAX_MESSAGES_PER_CHAT: "50",
    MAX_CHATS_PER_USER: "10",
    MAINTENANCE_MODE: "false",
    ALLOW_REGISTRATIONS: "true",
    SYSTEM_PROMPT: DEFAULT_SYSTEM_PROMPT,
}


def get_value(name: str) -> str | None:
    """Return the stored value, or None when the row is missing or empty."""
    db = get_supabase()
    result = db.table(SETTINGS).select("value").eq("name", name).execute()
    if not result.data:
        return None
    value = result.data[0].get("value")
    return value or None


def get_all() -> dict[str, str]:
    db = get_supabase()
    result = db.table(SETTINGS).select("name, value").execute()
    return {row["name"]: row["value"] for row in result.data if row.get("name") and row.get("value")}


def set_value(name: str, value: str) -> None:
    db = get_supabase()
    existing = db.table(SETTINGS).select("id").eq("name", name).execute()
    if existing.data:
        db.table(SETTINGS).update({"value": value}).eq("name", name).execute()
    else:
        db.table(SETTINGS).insert({"name": name, "value": value}).execute()


def insert_if_missing(name: str, value: str) -> None:
    db = get_supabase()
    db.table(SETTINGS).upsert({"name": name, "value": value}, on_conflict="name", ignore_duplicates=True).execute()


def sync_defaults() -> list[str]:
    """Push the environment API key into the table and seed missing defaults.

    Returns the names that were written or seeded.
    """
    settings = get_settings()
    db = get_supabase()
    touched = []

    if settings.GROQ_API_KEY:
        db.table(SETTINGS).upsert({"name": LLM_API_KEY, "value": settings.GROQ_API_KEY}, on_conflict="name").execute()
        touched.append(LLM_API_KEY)

    for name, value in DEFAULTS.items():
        insert_if_missing(name, value)
        touched.append(name)

    logger.info("Synchronized settings: %s", ", ".join(touched))
    return touched


# --- Typed accessors used at request time ---

def get_int(name: str) -> int:
    raw = get_value(name)
    try:
        return int(raw) if raw is not None else int(DEFAULTS[name])
    except ValueError:
        logger.warning("Setting %s has non-integer value %r, using default", name, raw)
        return int(DEFAULTS[name])


def get_bool(name: str) -> bool:
    raw = get_value(name)
    if raw is None:
        raw = DEFAULTS[name]
    return raw == "true"


def get_system_prompt() -> str:
    return get_value(SYSTEM_PROMPT) or DEFAULT_SYSTEM_PROMPT


def resolve_llm_api_key() -> str | None:
    """Settings table first, then the GROQ_API_KEY environment variable."""
    key = get_value(LLM_API_KEY)
    if key:
        return key
    env_key = get_settings().GROQ_API_KEY
    if env_key:
        logger.debug("Using LLM API key from environment")
        return env_key
    return None
