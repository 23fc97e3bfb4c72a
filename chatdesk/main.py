"""chatdesk FastAPI application entry point."""

import logging

from fastapi import FastAPI

from chatdesk.admin.routes import router as admin_router
from chatdesk.auth.routes import router as auth_router
from chatdesk.chats.routes import router as chats_router
from chatdesk.config.cors import SecurityHeadersMiddleware, configure_cors
from chatdesk.config.settings import get_settings
from chatdesk.messages.routes import router as messages_router
from chatdesk.middleware.error_handler import register_error_handlers
from chatdesk.middleware.rate_limiter import RateLimiterMiddleware
from chatdesk.middleware.request_id import RequestIDMiddleware
from chatdesk.runtime_settings.routes import router as settings_router
from chatdesk.users.routes import router as user_router

logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="chatdesk",
    description=(
        "Multi-tenant chat service backed by a large-language-model API.\n\n"
        "## Features\n"
        "- JWT authentication with refresh token rotation\n"
        "- Per-user chats with automatic titling on the first message\n"
        "- Blocking and Server-Sent-Events replies (Groq, Google AI fallback)\n"
        "- Admin management of users, chats and runtime settings\n"
        "- Usage statistics for users and administrators\n\n"
        "## Authentication\n"
        "All endpoints except `/health`, `/docs` and `/api/v1/auth/*` require "
        "`Authorization: Bearer <jwt>`. Admin endpoints also require the admin role."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Auth", "description": "Register, login, token refresh, logout"},
        {"name": "User", "description": "Own profile and activity statistics"},
        {"name": "Chats", "description": "CRUD operations for the caller's chats"},
        {"name": "Messages", "description": "Send and list messages"},
        {"name": "Streaming", "description": "Server-Sent Events for streamed replies"},
        {"name": "Admin", "description": "User, chat and settings management"},
    ],
)

# --- Middleware (the last one added runs outermost) ---
app.add_middleware(RateLimiterMiddleware)
configure_cors(app)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)

# --- Error handlers ---
register_error_handlers(app)

# --- Routes ---
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(chats_router)
app.include_router(messages_router)
app.include_router(admin_router)
app.include_router(settings_router)


@app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
async def health_check():
    return {"status": "ok"}
