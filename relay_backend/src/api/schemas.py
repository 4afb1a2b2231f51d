from typing import Any, Dict, List

from pydantic import BaseModel, Field

# A row is passed through exactly as the database service returned it.
Row = Dict[str, Any]
ResultSet = List[Row]


# PUBLIC_INTERFACE
class HealthStatus(BaseModel):
    """Fixed liveness payload."""
    status: str = Field("ok", description="Always 'ok' while the process serves requests")
    service: str = Field("api-server", description="Service identifier")
