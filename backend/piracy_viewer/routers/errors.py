from fastapi import HTTPException

from ..services.errors import (
    DataSourceError,
    IncidentServiceError,
    InvalidSourceError,
    QueryExecutionError,
    UnknownFieldError,
    UnsupportedFilterError,
)


def to_http_error(e: IncidentServiceError) -> HTTPException:
    """Caller mistakes are 400s; upstream trouble is a 502."""
    if isinstance(e, (UnsupportedFilterError, UnknownFieldError, InvalidSourceError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (QueryExecutionError, DataSourceError)):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
