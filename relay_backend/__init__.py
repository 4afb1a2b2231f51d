"""
Package marker for relay_backend.

This ensures 'relay_backend' is importable from the repository root,
so uvicorn relay_backend.main_app:app works without modifying PYTHONPATH.
"""
# PUBLIC_INTERFACE
def get_version() -> str:
    """Return the relay package version (static for now)."""
    return "0.1.0"
