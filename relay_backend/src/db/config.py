"""
Database service configuration for the relay.

The database is a managed service reached over HTTP with a base URL and an access key
(SUPABASE_URL / SUPABASE_KEY, see src.api.settings). Nothing is stored locally and no
connection is kept between requests.
"""

from __future__ import annotations

from fastapi import Request

from .service import EntitiesClient


# PUBLIC_INTERFACE
def get_entities_client(request: Request) -> EntitiesClient:
    """Build an EntitiesClient from the settings the running app was created with."""
    settings = request.app.state.settings
    return EntitiesClient(
        base_url=settings.supabase_url,
        api_key=settings.supabase_key,
        table=settings.entities_table,
    )
