#!/usr/bin/env python3
"""
Terminal front end for the session reconciler.

Usage:
  python -m relay_backend.run_client            # initial-load check, print the page
  python -m relay_backend.run_client login      # open the gateway login in a browser
  python -m relay_backend.run_client logout     # open the gateway logout URL

Reads RELAY_API_URL and RELAY_LOGOUT_URL (defaults: http://localhost:8080/api,
http://localhost:8080/logout).
"""

import sys
from typing import List, Optional

from relay_backend.src import startup  # noqa: F401
from relay_backend.src.webclient import RenderedPage, SessionController


def format_page(page: RenderedPage) -> str:
    lines: List[str] = []
    if page.login_visible:
        lines.append("[niet ingelogd] gebruik 'login' om in te loggen")
    if page.data_visible:
        lines.append(f"[ingelogd als {page.user_name}]")
        lines.append(page.data_text)
    if page.error_text:
        lines.append(page.error_text)
    return "\n".join(lines)


# PUBLIC_INTERFACE
def main(argv: Optional[List[str]] = None) -> int:
    """Run one client action and print the result."""
    args = sys.argv[1:] if argv is None else argv
    action = args[0] if args else "fetch"

    with SessionController() as controller:
        if action == "login":
            print(controller.login())
            return 0
        if action == "logout":
            print(controller.logout())
            return 0
        if action != "fetch":
            print(f"Unknown action: {action} (expected fetch, login or logout)", file=sys.stderr)
            return 2
        controller.start()
        print(format_page(controller.page()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
