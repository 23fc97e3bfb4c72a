"""Database table name constants and type references."""

# Table names — single source of truth for Supabase queries
USERS = "users"
CHATS = "chats"
MESSAGES = "messages"
SETTINGS = "settings"
REFRESH_TOKENS = "refresh_tokens"

# User roles
ROLE_ADMIN = "admin"
ROLE_MEMBER = "user"

# Message roles
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_SYSTEM = "system"

DEFAULT_CHAT_TITLE = "New Chat"
