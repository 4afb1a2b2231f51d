"""
Client-side session reconciler for the relay.

Drives a two-state (logged out / logged in) view purely from the HTTP responses of
the data endpoint.
"""

from .controller import ClientNetworkError, SessionController  # noqa: F401
from .state import FetchOutcome, OutcomeKind, RenderedPage, SessionView, UIState, classify_response, render  # noqa: F401

__all__ = [
    "ClientNetworkError",
    "FetchOutcome",
    "OutcomeKind",
    "RenderedPage",
    "SessionController",
    "SessionView",
    "UIState",
    "classify_response",
    "render",
]
