# piracy_viewer/routers/stats.py

from typing import List

from fastapi import APIRouter, Depends

from ..dependencies import get_incident_service, resolve_source
from ..models.data_source import DataSource
from ..models.incident import YearCount
from ..services.errors import IncidentServiceError
from ..services.incident_service import IncidentService
from .errors import to_http_error

router = APIRouter()


async def _call(coro):
    try:
        return await coro
    except IncidentServiceError as e:
        raise to_http_error(e)


# --- Filter options for the chart / map widgets --- #

@router.get("/stats/years", response_model=List[int])
async def years(
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    """Years with at least one dated incident, newest first."""
    return await _call(service.get_years(source))


@router.get("/stats/year-counts", response_model=List[YearCount])
async def year_counts(
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    return await _call(service.get_year_counts(source))


@router.get("/stats/countries", response_model=List[str])
async def countries(
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    """Coastal states and vessel flag countries, merged and sorted."""
    return await _call(service.get_countries(source))


@router.get("/stats/territorial-water-statuses", response_model=List[str])
async def territorial_water_statuses(
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    return await _call(service.get_territorial_water_statuses(source))


@router.get("/stats/vessel-statuses", response_model=List[str])
async def vessel_statuses(
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    return await _call(service.get_vessel_statuses(source))


@router.get("/stats/incident-types", response_model=List[str])
async def incident_types(
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    return await _call(service.get_incident_types(source))


@router.get("/stats/incident-actions", response_model=List[str])
async def incident_actions(
    source: str = Depends(resolve_source),
    service: IncidentService = Depends(get_incident_service),
):
    return await _call(service.get_incident_actions(source))


@router.get("/stats/geolocation-sources", response_model=List[str])
async def geolocation_sources(service: IncidentService = Depends(get_incident_service)):
    return await service.get_geolocation_sources()


# --- Data sources --- #

@router.get("/data-sources", response_model=List[DataSource])
async def data_sources(service: IncidentService = Depends(get_incident_service)):
    return await _call(service.get_data_sources())
