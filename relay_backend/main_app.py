"""
Stable top-level FastAPI application module.

Use from repository root:
    uvicorn relay_backend.main_app:app --host 0.0.0.0 --port 3000
"""

# PUBLIC_INTERFACE
# Re-export FastAPI app object for uvicorn
from relay_backend.src.api.main import app  # noqa: F401
