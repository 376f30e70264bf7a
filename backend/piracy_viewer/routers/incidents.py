# piracy_viewer/routers/incidents.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from ..dependencies import get_incident_service, resolve_source
from ..models.geojson import FeatureCollection
from ..models.incident import IncidentFilter
from ..services.errors import IncidentServiceError
from ..services.incident_service import IncidentService
from .errors import to_http_error

router = APIRouter()


@router.get("/default", response_model=FeatureCollection)
async def get_default_incidents(
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    """
    The most recent 100 incidents (id + position only), newest first,
    as a GeoJSON FeatureCollection for the initial map view.
    """
    try:
        return await service.get_default_incidents(source)
    except IncidentServiceError as e:
        raise to_http_error(e)


@router.get("", response_model=FeatureCollection)
async def get_incidents(
    id: Optional[int] = None,
    begin_date: Optional[date] = None,
    end_date: Optional[date] = None,
    fields: List[str] = Query(default=["*"]),
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    """
    Incidents matching the given id and/or date range. At least one
    condition is required.
    """
    try:
        incident_filter = IncidentFilter(id=id, begin_date=begin_date, end_date=end_date)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )

    try:
        return await service.get_incidents(source, incident_filter, fields)
    except IncidentServiceError as e:
        raise to_http_error(e)
