"""In-memory sliding window rate limiter keyed by user_id."""

import time
from collections import defaultdict, deque

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from chatdesk.auth.dependencies import extract_bearer_token
from chatdesk.auth.jwt import verify_token
from chatdesk.config.settings import get_settings
from chatdesk.middleware.error_handler import error_body

WINDOW_SECONDS = 60.0
EXEMPT_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


def _user_id_from_request(request: Request) -> str | None:
    token = extract_bearer_token(request)
    if not token:
        return None
    try:
        return verify_token(token).get("sub")
    except Exception:
        # Invalid tokens are rejected by the auth dependency
        return None


def is_ai_path(path: str, method: str) -> bool:
    """POST /api/v1/chats/<id>/messages[/stream] triggers an LLM call."""
    if method != "POST":
        return False
    parts = path.rstrip("/").split("/")
    return len(parts) >= 6 and parts[1:4] == ["api", "v1", "chats"] and parts[5] == "messages"


class RateLimiterMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        # user_id -> request timestamps within the window
        self._standard_windows: dict[str, deque[float]] = defaultdict(deque)
        self._ai_windows: dict[str, deque[float]] = defaultdict(deque)
        self._last_prune = time.time()

    def _check_limit(self, window: deque[float], limit: int, now: float) -> tuple[bool, int]:
        """Remove expired entries, check if under limit. Returns (allowed, retry_after_seconds)."""
        cutoff = now - WINDOW_SECONDS
        while window and window[0] < cutoff:
            window.popleft()

        if len(window) >= limit:
            retry_after = int(window[0] - cutoff) + 1
            return False, retry_after

        window.append(now)
        return True, 0

    def _prune(self, now: float) -> None:
        """Drop users whose windows hold no request newer than the window."""
        cutoff = now - WINDOW_SECONDS
        for windows in (self._standard_windows, self._ai_windows):
            for user_id in [uid for uid, window in windows.items() if not window or window[-1] < cutoff]:
                del windows[user_id]
        self._last_prune = now

    def _reject(self, request: Request, message: str, retry_after: int) -> Response:
        return JSONResponse(
            status_code=429,
            content=error_body("rate_limit", message, getattr(request.state, "request_id", None)),
            headers={"Retry-After": str(retry_after)},
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        user_id = _user_id_from_request(request)
        if not user_id:
            return await call_next(request)

        settings = get_settings()
        now = time.time()
        if now - self._last_prune >= WINDOW_SECONDS:
            self._prune(now)

        if is_ai_path(request.url.path, request.method):
            allowed, retry_after = self._check_limit(self._ai_windows[user_id], settings.RATE_LIMIT_AI, now)
            if not allowed:
                return self._reject(request, "AI generation rate limit exceeded", retry_after)

        allowed, retry_after = self._check_limit(self._standard_windows[user_id], settings.RATE_LIMIT_STANDARD, now)
        if not allowed:
            return self._reject(request, "Rate limit exceeded", retry_after)

        return await call_next(request)
