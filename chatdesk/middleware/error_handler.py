"""Global exception handlers mapping errors to the JSON error envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

ERROR_TYPES = {
    400: "bad_request",
    401: "authentication_error",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    429: "rate_limit",
    502: "upstream_error",
    503: "service_unavailable",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def error_body(error_type: str, message: str, request_id: str | None = None) -> dict:
    error = {"type": error_type, "message": message}
    if request_id is not None:
        error["request_id"] = request_id
    return {"status": "error", "error": error}


def _error_response(status: int, error_type: str, message: str, request_id: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status, content=error_body(error_type, message, request_id), headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        messages = "; ".join(
            f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        return _error_response(422, "validation_error", messages, _request_id(request))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("%s %s failed with %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
        error_type = ERROR_TYPES.get(exc.status_code, "internal_error" if exc.status_code >= 500 else "http_error")
        return _error_response(exc.status_code, error_type, str(exc.detail), _request_id(request), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(500, "internal_error", "An unexpected error occurred", _request_id(request))
