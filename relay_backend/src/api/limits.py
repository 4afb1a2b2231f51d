"""
Request body size cap.

JSON and url-encoded bodies larger than the configured limit are answered with 413
before any route handler runs. The declared Content-Length is checked first; bodies
sent without one are buffered up to the limit and replayed to the application.
"""

from __future__ import annotations

from typing import Any, Dict, List

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .observability import APP_LOGGER

_LIMITED_CONTENT_TYPES = ("application/json", "application/x-www-form-urlencoded")


def _too_large_response(limit: int) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"error": "Payload too large", "message": f"Request body exceeds {limit} bytes"},
    )


# PUBLIC_INTERFACE
class BodySizeLimitMiddleware:
    """Pure ASGI middleware enforcing a maximum body size for JSON/url-encoded requests."""

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        content_type = headers.get("content-type", "").split(";")[0].strip().lower()
        if content_type not in _LIMITED_CONTENT_TYPES:
            await self.app(scope, receive, send)
            return

        declared = headers.get("content-length")
        if declared is not None and declared.strip().isdigit():
            if int(declared) > self.max_body_bytes:
                self._log_rejection(scope, int(declared))
                await _too_large_response(self.max_body_bytes)(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        # No usable Content-Length: buffer the stream, stopping as soon as it exceeds the cap.
        chunks: List[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # Client went away before finishing the body.
                return
            body = message.get("body", b"")
            received += len(body)
            if received > self.max_body_bytes:
                self._log_rejection(scope, received)
                await _too_large_response(self.max_body_bytes)(scope, receive, send)
                return
            chunks.append(body)
            more_body = message.get("more_body", False)

        replayed = False

        async def replay_receive() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": b"".join(chunks), "more_body": False}
            return await receive()

        await self.app(scope, replay_receive, send)

    def _log_rejection(self, scope: Scope, size: int) -> None:
        extra: Dict[str, Any] = {
            "event": "request_body_too_large",
            "path": scope.get("path"),
            "method": scope.get("method"),
            "status_code": 413,
            "extra": {"size": size, "limit": self.max_body_bytes},
        }
        APP_LOGGER.warning("request_body_too_large", extra=extra)
