from typing import Optional

from fastapi import HTTPException, Request

from .config import DEFAULT_SHEET_URL
from .services.incident_service import IncidentService


# Dependency
def get_incident_service(request: Request) -> IncidentService:
    return request.app.state.incident_service


def resolve_source(source: Optional[str] = None) -> str:
    """Query param `source`, falling back to the configured sheet."""
    source = source or DEFAULT_SHEET_URL
    if not source:
        raise HTTPException(
            status_code=400,
            detail="No source given and DEFAULT_SHEET_URL is not configured",
        )
    return source
