"""
Structured logging and request correlation for the relay service.

The application logger ("relay_backend") writes one JSON object per line. Request
scoped events go through log_event(), which attaches the request id, path, method and
a redacted snapshot of query params and headers.
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send


class SafeJSONFormatter(logging.Formatter):
    """A minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now(timezone.utc).isoformat()
        payload: Dict[str, Any] = {
            "timestamp": ts,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "event": getattr(record, "event", None),
            "request_id": getattr(record, "request_id", None),
            "path": getattr(record, "path", None),
            "method": getattr(record, "method", None),
            "status_code": getattr(record, "status_code", None),
            "query_params": getattr(record, "query_params", None),
            "headers": getattr(record, "headers", None),
            "extra": getattr(record, "extra", None),
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Clean out None values to minimize noise
        cleaned = {k: v for k, v in payload.items() if v is not None}
        try:
            return json.dumps(cleaned, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return f"{ts} {record.levelname} {record.name} {record.getMessage()}"


def configure_logging() -> logging.Logger:
    """Initialize the application logger with JSON formatter and level from env LOG_LEVEL."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger("relay_backend")
    logger.setLevel(level)

    # Avoid adding multiple handlers on hot reload
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(SafeJSONFormatter())
        logger.addHandler(handler)
        # Prevent propagation to root to avoid duplicate logs with Uvicorn
        logger.propagate = False

    for noisy in ("httpx", "httpcore"):
        nl = logging.getLogger(noisy)
        if nl.level == logging.NOTSET:
            nl.setLevel(logging.WARNING)

    return logger


APP_LOGGER = configure_logging()


# -----------------------
# Redaction and context extraction
# -----------------------

_SENSITIVE_KEYS = {
    "token",
    "key",
    "apikey",
    "secret",
    "authorization",
    "cookie",
    "set-cookie",
}

_SAFE_HEADER_NAMES = [
    "user-agent",
    "origin",
    "x-forwarded-for",
    "x-real-ip",
    "x-request-id",
    "x-forwarded-proto",
    "x-forwarded-host",
    "x-original-uri",
]


def _should_redact(key: str) -> bool:
    key_lower = key.lower()
    return any(s in key_lower for s in _SENSITIVE_KEYS)


def redact_mapping(mapping: Dict[str, Any]) -> Dict[str, str]:
    """Return a redacted copy of a mapping for safe logging."""
    return {k: "***redacted***" if _should_redact(k) else str(v) for k, v in mapping.items()}


def _headers_subset(request: Request) -> Dict[str, str]:
    """Extract a safe subset of headers for observability (non-sensitive)."""
    headers = {}
    for name in _SAFE_HEADER_NAMES:
        val = request.headers.get(name)
        if val is not None:
            headers[name] = val
    return headers


def request_id_of(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


# PUBLIC_INTERFACE
def log_event(
    level: int,
    event: str,
    request: Request,
    status_code: Optional[int] = None,
    **fields: Any,
) -> None:
    """Centralized structured logging with common request context."""
    extra = {
        "event": event,
        "request_id": request_id_of(request),
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
        "query_params": redact_mapping(dict(request.query_params)),
        "headers": _headers_subset(request),
        "extra": fields or {},
    }
    APP_LOGGER.log(level, event, extra=extra)


# -----------------------
# Middleware: Request ID
# -----------------------

class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign/propagate X-Request-ID and echo it in responses."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        except Exception:
            APP_LOGGER.exception("Unhandled exception in middleware", extra={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
                "event": "unhandled_exception_middleware",
            })
            raise
        response.headers["X-Request-ID"] = request_id
        return response


# -----------------------
# Middleware: unhandled exceptions
# -----------------------

class UnhandledErrorMiddleware:
    """Turn exceptions escaping the routes into a response via `handler(request, exc)`.

    Starlette sends responses for `Exception` handlers from its outermost middleware,
    past CORS and request-id propagation. Mounted innermost, this middleware lets the
    500 pass back through them like any other response.
    """

    def __init__(self, app: ASGIApp, handler: Callable[[Request, Exception], Awaitable[Response]]) -> None:
        self.app = app
        self.handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except Exception as exc:
            if response_started:
                # Headers are on the wire; nothing sensible can be sent anymore.
                raise
            response = await self.handler(Request(scope, receive), exc)
            await response(scope, receive, send)
