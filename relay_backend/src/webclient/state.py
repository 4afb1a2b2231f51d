"""
Session state for the browser-side client of the relay.

The client never holds credentials. It learns whether the gateway considers it logged
in from the side effects of an ordinary data request: a successful response means a
valid session, a redirect or an error status means there is none.

Everything in this module is pure: classify_response() turns one HTTP response into a
FetchOutcome, and render() turns a SessionView into what the page shows.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

NO_DATA_MESSAGE = "Geen data gevonden."
FETCH_FAILED_MESSAGE = "Fout bij ophalen data"
NOT_LOGGED_IN_MESSAGE = "Niet ingelogd, wordt doorgestuurd naar login"
NETWORK_ERROR_MESSAGE = "Netwerkfout bij ophalen data"
INVALID_RESPONSE_MESSAGE = "Ongeldig antwoord van de server"
USER_LABEL = "Gebruiker"


class UIState(str, Enum):
    LOGGED_OUT = "logged_out"
    LOGGED_IN = "logged_in"


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    REDIRECTED = "redirected"
    HTTP_ERROR = "http_error"
    INVALID_RESPONSE = "invalid_response"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class FetchOutcome:
    """What one data request told us about the session."""
    kind: OutcomeKind
    payload: Any = None
    message: str = ""
    status_code: Optional[int] = None


@dataclass(frozen=True)
class SessionView:
    """Snapshot of the controller's state; the single input to render()."""
    state: UIState = UIState.LOGGED_OUT
    payload: Any = None
    error: str = ""


@dataclass(frozen=True)
class RenderedPage:
    login_visible: bool
    data_visible: bool
    user_name: str
    data_text: str
    error_text: str


def _was_redirected(response: httpx.Response) -> bool:
    return response.status_code == 302 or bool(response.history)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return FETCH_FAILED_MESSAGE
    if isinstance(body, dict):
        for key in ("message", "error"):
            val = body.get(key)
            if isinstance(val, str) and val.strip():
                return val
    return FETCH_FAILED_MESSAGE


# PUBLIC_INTERFACE
def classify_response(response: httpx.Response) -> FetchOutcome:
    """Map one response from the data endpoint to a FetchOutcome.

    A redirect wins over the final status: a followed redirect usually ends on the
    identity provider's login page with a 200.
    """
    status = response.status_code
    if _was_redirected(response):
        return FetchOutcome(OutcomeKind.REDIRECTED, message=NOT_LOGGED_IN_MESSAGE, status_code=status)
    if response.is_success:
        try:
            payload = response.json()
        except ValueError:
            return FetchOutcome(OutcomeKind.INVALID_RESPONSE, message=INVALID_RESPONSE_MESSAGE, status_code=status)
        return FetchOutcome(OutcomeKind.SUCCESS, payload=payload, status_code=status)
    return FetchOutcome(OutcomeKind.HTTP_ERROR, message=_error_message(response), status_code=status)


def format_payload(payload: Any) -> str:
    if isinstance(payload, list) and not payload:
        return NO_DATA_MESSAGE
    return json.dumps(payload, indent=2, ensure_ascii=False)


# PUBLIC_INTERFACE
def render(view: SessionView) -> RenderedPage:
    """Render the page for a session snapshot. Exactly one section is visible."""
    logged_in = view.state is UIState.LOGGED_IN
    return RenderedPage(
        login_visible=not logged_in,
        data_visible=logged_in,
        user_name=USER_LABEL if logged_in else "",
        data_text=format_payload(view.payload) if logged_in else "",
        error_text=view.error,
    )
