import logging
import os
import webbrowser
from typing import Any, Callable, Optional

import httpx

from .state import (
    NETWORK_ERROR_MESSAGE,
    FetchOutcome,
    OutcomeKind,
    RenderedPage,
    SessionView,
    UIState,
    classify_response,
    render,
)

LOG = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_LOGOUT_URL = "http://localhost:8080/logout"


class ClientNetworkError(Exception):
    """The data request never produced an HTTP response."""


class SessionController:
    """
    Owns the client's UIState and is the only place it changes.

    Every data request doubles as an authentication check: the gateway in front of the
    relay either lets it through (logged in) or redirects it to the identity provider
    (logged out). Cookies set by the gateway live in the shared httpx cookie jar and are
    sent with every request, like `fetch(..., credentials: "include")`.

    There is no locking or cancellation. If two reconciliations overlap, whichever
    finishes last decides the state.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        logout_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        navigate: Optional[Callable[[str], Any]] = None,
    ):
        self.api_url = (api_url or os.getenv("RELAY_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.logout_url = logout_url or os.getenv("RELAY_LOGOUT_URL") or DEFAULT_LOGOUT_URL
        # Browsers follow redirects on fetch; keep that so the redirected flag is observable.
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(follow_redirects=True)
        self._navigate = navigate or webbrowser.open
        self._view = SessionView()

    @property
    def data_url(self) -> str:
        return f"{self.api_url}/data"

    @property
    def state(self) -> UIState:
        return self._view.state

    @property
    def view(self) -> SessionView:
        return self._view

    # PUBLIC_INTERFACE
    def page(self) -> RenderedPage:
        """Render the current state."""
        return render(self._view)

    # -----------------------
    # Transitions
    # -----------------------

    def _enter_logged_in(self, payload: Any) -> None:
        self._view = SessionView(state=UIState.LOGGED_IN, payload=payload, error="")

    def _enter_logged_out(self, error: str = "") -> None:
        self._view = SessionView(state=UIState.LOGGED_OUT, payload=None, error=error)

    def apply(self, outcome: FetchOutcome) -> UIState:
        """Apply one fetch outcome through the two transitions and return the new state."""
        if outcome.kind is OutcomeKind.SUCCESS:
            self._enter_logged_in(outcome.payload)
        elif outcome.kind is OutcomeKind.REDIRECTED:
            # The gateway intercepted the request; the page shows the login section, nothing else.
            self._enter_logged_out()
        else:
            self._enter_logged_out(error=f"Fout: {outcome.message}")
        return self._view.state

    # -----------------------
    # Reconciliation
    # -----------------------

    def _get_data(self) -> httpx.Response:
        try:
            return self._http.get(self.data_url)
        except httpx.TransportError as e:
            raise ClientNetworkError(str(e) or e.__class__.__name__) from e

    # PUBLIC_INTERFACE
    def check_session_via_data_fetch(self) -> UIState:
        """
        Infer the session state by fetching the data endpoint, and return it.

        Contract:
        - 2xx with a JSON body (and no redirect)   -> LOGGED_IN, payload shown
        - status 302, or the response followed a redirect -> LOGGED_OUT, regions cleared
        - any other status                          -> LOGGED_OUT, server message shown
        - no response at all or unreadable body     -> LOGGED_OUT, generic message shown

        Never raises; every failure ends in LOGGED_OUT.
        """
        try:
            outcome = classify_response(self._get_data())
        except ClientNetworkError as e:
            LOG.warning("Data fetch failed before a response arrived: %s", e)
            outcome = FetchOutcome(OutcomeKind.NETWORK_ERROR, message=NETWORK_ERROR_MESSAGE)
        except httpx.HTTPError as e:
            LOG.warning("Data fetch failed: %s", e)
            outcome = FetchOutcome(OutcomeKind.NETWORK_ERROR, message=NETWORK_ERROR_MESSAGE)

        if outcome.kind is not OutcomeKind.SUCCESS:
            LOG.info("Session check ended in %s (status=%s)", outcome.kind.value, outcome.status_code)
        return self.apply(outcome)

    # PUBLIC_INTERFACE
    def start(self) -> UIState:
        """Initial-load reconciliation."""
        return self.check_session_via_data_fetch()

    # PUBLIC_INTERFACE
    def fetch_data(self) -> UIState:
        """User-initiated "fetch data" action. Same contract as check_session_via_data_fetch()."""
        return self.check_session_via_data_fetch()

    # -----------------------
    # Navigation
    # -----------------------

    # PUBLIC_INTERFACE
    def login(self) -> str:
        """Navigate to the data endpoint so the gateway can redirect to its identity provider."""
        url = self.data_url
        self._navigate(url)
        return url

    # PUBLIC_INTERFACE
    def logout(self) -> str:
        """Navigate to the gateway's logout URL. The relay keeps no session to clear."""
        self._navigate(self.logout_url)
        return self.logout_url

    def close(self) -> None:
        """Close the HTTP client, unless the caller passed it in and still owns it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "SessionController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
