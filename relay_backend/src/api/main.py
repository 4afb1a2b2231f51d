"""
FastAPI application for the entities relay.

Routes:
    GET /health, /api/health  -> fixed liveness payload
    GET /data, /api/data      -> first 10 rows of the entities table

Authentication is handled by the gateway in front of this service. CORS admits exactly
one browser origin with credentials so the gateway's session cookie reaches it.
"""

from __future__ import annotations

# Load .env and configure logging as early as possible
from .. import startup  # noqa: F401

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import data as data_router
from . import health as health_router
from .errors import ErrorResponse, describe_exception
from .limits import BodySizeLimitMiddleware
from .observability import APP_LOGGER, RequestIDMiddleware, UnhandledErrorMiddleware, log_event, request_id_of
from .settings import RelaySettings, get_settings

openapi_tags = [
    {"name": "Health", "description": "Liveness checks for external orchestration."},
    {"name": "Data", "description": "Read-only relay of the fixed entities query."},
]

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]


async def global_exception_handler(request: Request, exc: Exception):
    """Capture any unhandled exception, log it, and return a 500 with the request id."""
    log_event(logging.ERROR, "unhandled_exception", request, status_code=500, error=describe_exception(exc))
    APP_LOGGER.exception("Unhandled exception", exc_info=exc, extra={
        "request_id": request_id_of(request),
        "path": request.url.path,
        "method": request.method,
        "event": "unhandled_exception",
    })
    payload = ErrorResponse(
        error="Internal Server Error",
        message=describe_exception(exc),
        request_id=request_id_of(request),
    )
    headers = {"X-Request-ID": payload.request_id} if payload.request_id else None
    return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True), headers=headers)


# PUBLIC_INTERFACE
def create_app(settings: Optional[RelaySettings] = None) -> FastAPI:
    """Create and configure the FastAPI app.

    Args:
        settings: Resolved configuration; read from the environment when omitted.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Entities Relay API",
        description="Relays a fixed read query to the managed database service behind an auth gateway.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings

    # Middleware added last runs first. Outer to inner: request-id propagation, CORS,
    # the body cap, then conversion of unhandled exceptions into a 500. Every response,
    # including preflights, 413s and 500s, passes back out through CORS and request-id.
    app.add_middleware(UnhandledErrorMiddleware, handler=global_exception_handler)
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_credentials=True,  # gateway session cookie must reach the relay
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestIDMiddleware)

    # Fallback for failures inside the middleware stack itself.
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(health_router.router)
    app.include_router(data_router.router)

    logging.getLogger("startup").info(
        "CORS configured with allow_credentials=True; allowed_origin=%s", settings.allowed_origin
    )
    logging.getLogger("startup").info(
        "App created; database service=%s table=%s", settings.supabase_url, settings.entities_table
    )
    return app


# PUBLIC_INTERFACE
app = create_app()
