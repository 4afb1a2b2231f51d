# PUBLIC_INTERFACE
from fastapi import APIRouter

from .schemas import HealthStatus

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    summary="Health Check",
    description="Liveness check. Never touches the database service.",
    response_model=HealthStatus,
)
@router.get(
    "/api/health",
    summary="Health Check (alias)",
    description="Alias of /health for clients that reach the relay through the /api prefix.",
    response_model=HealthStatus,
)
def health_check() -> HealthStatus:
    """Simple health check endpoint."""
    return HealthStatus()
