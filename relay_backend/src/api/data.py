import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..db.config import get_entities_client
from ..db.service import EntitiesClient
from .errors import ErrorResponse, UpstreamQueryError, upstream_error_response
from .observability import APP_LOGGER, log_event, request_id_of
from .settings import ROW_LIMIT

router = APIRouter(tags=["Data"])

_DESCRIPTION = (
    "Returns the first 10 rows of the entities table as a JSON array (possibly empty). "
    "Authentication is enforced by the gateway in front of this service; query string and body are ignored. "
    "On a database failure responds 500 with {error, message}, where message is the database service's own text."
)


# PUBLIC_INTERFACE
@router.get(
    "/data",
    summary="Fetch entities",
    description=_DESCRIPTION,
    responses={500: {"model": ErrorResponse}},
)
@router.get(
    "/api/data",
    summary="Fetch entities (alias)",
    description=_DESCRIPTION,
    responses={500: {"model": ErrorResponse}},
)
def get_data(request: Request, client: EntitiesClient = Depends(get_entities_client)):
    """Run the one fixed read query and relay its rows unchanged."""
    try:
        rows = client.select_rows(ROW_LIMIT)
    except UpstreamQueryError as exc:
        log_event(
            logging.ERROR,
            "upstream_query_failed",
            request,
            status_code=500,
            error=str(exc),
            upstream_status=exc.status_code,
            table=client.table,
        )
        APP_LOGGER.debug("Database error detail", exc_info=True, extra={"request_id": request_id_of(request)})
        return upstream_error_response(exc)

    log_event(logging.INFO, "data_fetched", request, status_code=200, rows=len(rows))
    return JSONResponse(status_code=200, content=rows)
