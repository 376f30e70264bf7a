from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class PointGeometry(BaseModel):
    type: Literal["Point"] = "Point"
    # [longitude, latitude]
    coordinates: List[float] = Field(min_length=2, max_length=2)


class Feature(BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: Optional[PointGeometry] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class FeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[Feature] = Field(default_factory=list)
