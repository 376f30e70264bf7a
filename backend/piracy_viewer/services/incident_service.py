# piracy_viewer/services/incident_service.py

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

import httpx
from pydantic import ValidationError

from ..config import SHEET_REQUEST_TIMEOUT
from ..models.data_source import DataSource
from ..models.geojson import FeatureCollection
from ..models.incident import IncidentFilter, IncidentRecord, YearCount
from .column_map import DEFAULT_COLUMN_MAP, ColumnMap
from .errors import DataSourceError, UnknownFieldError, UnsupportedFilterError
from .geojson import incidents_to_geojson
from .query_renderer import render_query
from .sanitize import sanitize_incidents

log = logging.getLogger(__name__)

DEFAULT_INCIDENT_LIMIT = 100

GEOLOCATION_SOURCES = ("IMB", "IMO", "ASAM")

YEAR_KEY = "year(date_occurred)"

# Headerless sheets label computed columns by letter, e.g. "year(B)"
_EXPR_LABEL_RE = re.compile(r"^(\w+)\(([A-Z]+)\)$")


class QueryExecutor(Protocol):
    async def execute(
        self, source_url: str, query: str, limit: Optional[int] = None
    ) -> List[Dict[str, Optional[str]]]: ...


def build_where(incident_filter: IncidentFilter) -> List[str]:
    """
    Turn a filter into where clauses, in semantic field names.
    Clauses are meant to be joined with 'and'.
    """
    where = []
    if incident_filter.id is not None:
        where.append(f"id = {int(incident_filter.id)}")
    if incident_filter.begin_date is not None:
        where.append(f"date_occurred >= date '{incident_filter.begin_date.isoformat()}'")
    if incident_filter.end_date is not None:
        where.append(f"date_occurred <= date '{incident_filter.end_date.isoformat()}'")
    return where


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


class IncidentService:
    """
    Builds sheet queries for the viewer's listings and aggregates, runs
    them through the executor and shapes the rows for the map and charts.

    All collaborators are passed in; nothing here is module-global except
    constants.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        column_map: ColumnMap = DEFAULT_COLUMN_MAP,
        data_sources_location: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.executor = executor
        self.column_map = column_map
        self.data_sources_location = data_sources_location
        self.http_client = http_client
        self.data_sources: Optional[List[DataSource]] = None

    # ------------------ internal helpers ------------------

    async def _run(self, source: str, query: str, limit: Optional[int] = None):
        rendered = render_query(self.column_map, query)
        records = await self.executor.execute(source, rendered, limit)
        return [self._relabel(r) for r in records]

    def _relabel(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Sheets without a header row label columns by letter; map them back."""
        out = {}
        for key, value in record.items():
            out[self._field_label(key)] = value
        return out

    def _field_label(self, key: str) -> str:
        field = self.column_map.field_for(key)
        if field:
            return field

        m = _EXPR_LABEL_RE.match(key)
        if m:
            field = self.column_map.field_for(m.group(2))
            if field:
                return f"{m.group(1)}({field})"
        return key

    async def _distinct(self, source: str, field: str) -> List[str]:
        query = (
            f"select count(id), {field} where {field} is not null "
            f"group by {field} order by {field} asc"
        )
        results = await self._run(source, query)
        return [r[field] for r in results if r.get(field)]

    def _select_list(self, fields: Sequence[str]) -> str:
        fields = list(fields) or ["*"]
        if "*" in fields:
            return "*"

        unknown = [f for f in fields if f not in self.column_map]
        if unknown:
            raise UnknownFieldError(unknown)

        # Features need coordinates to land on the map
        for geo in ("latitude", "longitude"):
            if geo not in fields:
                fields.append(geo)
        return ", ".join(fields)

    # ------------------ incident listings ------------------

    async def get_default_incidents(self, source: str) -> FeatureCollection:
        query = "select id, latitude, longitude order by date_occurred desc"
        incidents = await self._run(source, query, DEFAULT_INCIDENT_LIMIT)
        incidents = sanitize_incidents(incidents)
        return incidents_to_geojson(incidents)

    async def get_incidents(
        self,
        source: str,
        incident_filter: IncidentFilter,
        fields: Sequence[str] = ("*",),
    ) -> FeatureCollection:
        """
        Incidents matching every condition set on the filter. A filter with
        nothing set is refused rather than turned into a full-table scan.
        """
        if incident_filter.is_empty():
            raise UnsupportedFilterError(
                "Unsupported filter: set at least one of id, begin_date, end_date"
            )

        where = build_where(incident_filter)
        query = (
            f"select {self._select_list(fields)} where {' and '.join(where)} "
            "order by date_occurred desc"
        )
        incidents = await self._run(source, query)
        incidents = sanitize_incidents(incidents)
        return incidents_to_geojson(incidents)

    def convert_incidents_to_geojson(self, incidents: Iterable[IncidentRecord]) -> FeatureCollection:
        return incidents_to_geojson(incidents)

    # ------------------ aggregates ------------------

    async def get_year_counts(self, source: str) -> List[YearCount]:
        query = (
            "select count(id), year(date_occurred) where date_occurred is not null "
            "group by year(date_occurred) order by year(date_occurred) desc"
        )
        results = await self._run(source, query)

        counts = []
        for r in results:
            year = _as_int(r.get(YEAR_KEY))
            if year is None:
                continue
            count = next((v for k, v in r.items() if k.startswith("count")), None)
            counts.append(YearCount(year=year, count=_as_int(count) or 0))
        return counts

    async def get_years(self, source: str) -> List[int]:
        return [yc.year for yc in await self.get_year_counts(source)]

    async def get_countries(self, source: str) -> List[str]:
        query = (
            "select closest_coastal_state, vessel_country "
            "where closest_coastal_state is not null and vessel_country is not null"
        )
        results = await self._run(source, query)

        countries = set()
        for r in results:
            for field in ("closest_coastal_state", "vessel_country"):
                if r.get(field):
                    countries.add(r[field])
        return sorted(countries)

    async def get_territorial_water_statuses(self, source: str) -> List[str]:
        return await self._distinct(source, "territorial_water_status")

    async def get_vessel_statuses(self, source: str) -> List[str]:
        return await self._distinct(source, "vessel_status")

    async def get_incident_types(self, source: str) -> List[str]:
        return await self._distinct(source, "incident_type")

    async def get_incident_actions(self, source: str) -> List[str]:
        return await self._distinct(source, "incident_action")

    async def get_geolocation_sources(self, *args, **kwargs) -> List[str]:
        return list(GEOLOCATION_SOURCES)

    # ------------------ data sources ------------------

    async def _read_data_sources(self) -> Any:
        location = self.data_sources_location
        if not location:
            raise DataSourceError("No data-source location configured")

        if location.startswith(("http://", "https://")):
            try:
                if self.http_client is not None:
                    resp = await self.http_client.get(location)
                else:
                    async with httpx.AsyncClient(timeout=SHEET_REQUEST_TIMEOUT) as client:
                        resp = await client.get(location)
                resp.raise_for_status()
                return resp.json()
            except (httpx.HTTPError, ValueError) as e:
                raise DataSourceError(f"Could not fetch data sources from {location}: {e}") from e

        try:
            text = await asyncio.to_thread(Path(location).read_text, encoding="utf-8")
            return json.loads(text)
        except (OSError, ValueError) as e:
            raise DataSourceError(f"Could not read data sources from {location}: {e}") from e

    async def get_data_sources(self) -> List[DataSource]:
        if self.data_sources is not None:
            return self.data_sources

        raw = await self._read_data_sources()
        try:
            sources = [DataSource.model_validate(item) for item in raw]
        except (TypeError, ValidationError) as e:
            raise DataSourceError(f"Malformed data-source listing: {e}") from e

        log.info("[IncidentService] Loaded %d data sources", len(sources))
        self.data_sources = sources
        return self.data_sources
