# piracy_viewer/services/geojson.py

from typing import Any, Iterable, Mapping, Union

from ..models.geojson import Feature, FeatureCollection, PointGeometry
from ..models.incident import IncidentRecord
from .sanitize import parse_float

GEOMETRY_FIELDS = ("latitude", "longitude")

RecordLike = Union[IncidentRecord, Mapping[str, Any]]


def incident_to_feature(record: RecordLike) -> Feature:
    """
    Build a Point feature from one incident row.

    Coordinates follow GeoJSON order, [longitude, latitude]. A row whose
    coordinates are missing or not numeric keeps its properties and gets
    a null geometry rather than being dropped; its raw coordinate values
    stay in the properties.
    """
    lat = parse_float(record.get("latitude"))
    lon = parse_float(record.get("longitude"))

    geometry = None
    if lat is not None and lon is not None:
        geometry = PointGeometry(coordinates=[lon, lat])

    if geometry is None:
        properties = dict(record)
    else:
        properties = {k: v for k, v in record.items() if k not in GEOMETRY_FIELDS}
    return Feature(geometry=geometry, properties=properties)


def incidents_to_geojson(records: Iterable[RecordLike]) -> FeatureCollection:
    return FeatureCollection(features=[incident_to_feature(r) for r in records])
