"""
Environment-driven settings for the relay service.

Env vars:
- SUPABASE_URL: base URL of the managed database service
- SUPABASE_KEY: access key sent to the database service
- ENTITIES_TABLE: the collection the fixed query reads (default: entities)
- HOST / PORT: bind address for uvicorn (defaults: 0.0.0.0:3000)
- ALLOWED_ORIGIN: the single browser origin allowed by CORS (default: http://localhost:8081)
- MAX_BODY_BYTES: cap for JSON / url-encoded request bodies (default: 10 MB)
"""

from __future__ import annotations

# Ensure .env is loaded and logging configured before reading env
from .. import startup  # noqa: F401

import logging
import os

from pydantic import BaseModel, Field

_logger = logging.getLogger("config.relay")

DEFAULT_SUPABASE_URL = "https://your-project.supabase.co"
DEFAULT_SUPABASE_KEY = "your-anon-key"
DEFAULT_ALLOWED_ORIGIN = "http://localhost:8081"
DEFAULT_PORT = 3000
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024

# The relay forwards exactly one query shape: the first ROW_LIMIT rows of one table.
ROW_LIMIT = 10


# PUBLIC_INTERFACE
class RelaySettings(BaseModel):
    """Resolved configuration for one relay process."""
    supabase_url: str = Field(DEFAULT_SUPABASE_URL, description="Database service base URL")
    supabase_key: str = Field(DEFAULT_SUPABASE_KEY, description="Database service access key")
    entities_table: str = Field("entities", description="Collection read by the fixed query")
    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(DEFAULT_PORT, description="Listening port")
    allowed_origin: str = Field(DEFAULT_ALLOWED_ORIGIN, description="Single allowed CORS origin")
    max_body_bytes: int = Field(DEFAULT_MAX_BODY_BYTES, description="Maximum accepted request body size")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _logger.warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default


# PUBLIC_INTERFACE
def get_settings() -> RelaySettings:
    """Build RelaySettings from the process environment.

    Empty values fall back to defaults. The allowed origin is normalized without a
    trailing slash because browsers never send one in the Origin header.
    """
    settings = RelaySettings(
        supabase_url=os.getenv("SUPABASE_URL", "").strip().rstrip("/") or DEFAULT_SUPABASE_URL,
        supabase_key=os.getenv("SUPABASE_KEY", "").strip() or DEFAULT_SUPABASE_KEY,
        entities_table=os.getenv("ENTITIES_TABLE", "").strip() or "entities",
        host=os.getenv("HOST", "").strip() or "0.0.0.0",
        port=_int_env("PORT", DEFAULT_PORT),
        allowed_origin=os.getenv("ALLOWED_ORIGIN", "").strip().rstrip("/") or DEFAULT_ALLOWED_ORIGIN,
        max_body_bytes=_int_env("MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES),
    )
    if settings.supabase_key == DEFAULT_SUPABASE_KEY:
        _logger.warning("SUPABASE_KEY is not set; database queries will use the placeholder key.")
    if settings.allowed_origin == "*":
        # Wildcard cannot be combined with credentialed CORS.
        _logger.error("ALLOWED_ORIGIN='*' is not allowed with credentials; using %s", DEFAULT_ALLOWED_ORIGIN)
        settings = settings.model_copy(update={"allowed_origin": DEFAULT_ALLOWED_ORIGIN})
    return settings
