#!/usr/bin/env python3
"""
Convenience launcher to run the relay bound to HOST:PORT (default 0.0.0.0:3000).

Usage:
  python -m relay_backend.run_server
"""

# PUBLIC_INTERFACE
def main():
    """Start uvicorn for the relay on the configured host/port."""
    import logging

    import uvicorn

    from relay_backend.src.api.settings import get_settings

    settings = get_settings()
    logging.getLogger("startup").info("API server running on port %s", settings.port)

    # Use the fully qualified path to avoid double-importing the app
    uvicorn.run("relay_backend.main_app:app", host=settings.host, port=settings.port, reload=False, lifespan="on")


if __name__ == "__main__":
    main()
