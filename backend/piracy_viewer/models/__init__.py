from .data_source import DataSource
from .geojson import Feature, FeatureCollection, PointGeometry
from .incident import IncidentFilter, IncidentRecord, YearCount

__all__ = [
    "DataSource",
    "Feature",
    "FeatureCollection",
    "PointGeometry",
    "IncidentFilter",
    "IncidentRecord",
    "YearCount",
]
