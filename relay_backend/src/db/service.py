import logging
from typing import Dict, Optional

import httpx

from ..api.errors import UpstreamQueryError, describe_exception
from ..api.schemas import ResultSet

LOG = logging.getLogger(__name__)


class EntitiesClient:
    """
    Read-only client for a Supabase/PostgREST table.

    Issues exactly one request per call:
        GET {base_url}/rest/v1/{table}?select=*&limit={limit}

    No retries and no timeout override; failures surface as UpstreamQueryError with the
    database service's own message.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "entities",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    # PUBLIC_INTERFACE
    def select_rows(self, limit: int) -> ResultSet:
        """
        Return up to `limit` rows of the table, in the order the service returns them.

        A null body is treated as an empty result set.
        """
        params = {"select": "*", "limit": str(limit)}
        try:
            with httpx.Client(transport=self._transport) as c:
                resp = c.get(self.table_url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            LOG.warning("Database service request failed: %s", describe_exception(e))
            raise UpstreamQueryError(describe_exception(e)) from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            LOG.warning("Database service returned %s: %s", resp.status_code, message)
            raise UpstreamQueryError(message, status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamQueryError(f"Invalid JSON from database service: {describe_exception(e)}", status_code=resp.status_code) from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise UpstreamQueryError(
                f"Unexpected response from database service: expected a list, got {type(data).__name__}",
                status_code=resp.status_code,
            )
        return data[:limit]


def _error_message(resp: httpx.Response) -> str:
    """Extract the PostgREST error message, falling back to the raw body, then the status."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "hint"):
            val = body.get(key)
            if isinstance(val, str) and val.strip():
                return val
    # The body is relayed in full; callers surface it verbatim.
    if not (resp.text or "").strip():
        return f"HTTP {resp.status_code}"
    return resp.text
