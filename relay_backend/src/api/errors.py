from typing import Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

# Human-readable headline returned with every failed data fetch.
DATA_FETCH_ERROR = "Fout bij ophalen data"


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Error body shared by the relay's failure responses."""
    error: str = Field(..., description="Fixed human-readable description of what failed.")
    message: str = Field(..., description="Underlying error text, surfaced verbatim.")
    request_id: Optional[str] = Field(None, description="Correlation id, when known.")


# PUBLIC_INTERFACE
class UpstreamQueryError(Exception):
    """The database service call failed (transport, permissions, bad response)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


def describe_exception(exc: BaseException) -> str:
    """Return the exception text, or its class name when the text is empty."""
    text = str(exc).strip()
    return text or exc.__class__.__name__


def upstream_error_response(exc: UpstreamQueryError) -> JSONResponse:
    """Build the 500 response for a failed database query.

    The underlying message is passed through unchanged so operators and the client can
    see what the database service reported.
    """
    payload = ErrorResponse(error=DATA_FETCH_ERROR, message=describe_exception(exc))
    return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))
