from datetime import date
from typing import Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IncidentRecord(TypedDict, total=False):
    """
    One incident row after sanitization. Every field is optional: a
    query may select only a few columns, and the sheet has blank cells.
    """

    id: Optional[str]
    date_occurred: Optional[date]
    time_of_day: Optional[str]
    time_of_day_recode: Optional[str]
    incident_type: Optional[str]
    incident_action: Optional[str]
    territorial_water_status: Optional[str]
    closest_coastal_state: Optional[str]
    closest_coastal_state_cow_code: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    location_precision: Optional[str]
    geolocation_source_imb: Optional[str]
    geolocation_source_imo: Optional[str]
    geolocation_source_asam: Optional[str]
    location_description: Optional[str]
    vessel_name: Optional[str]
    vessel_country: Optional[str]
    vessel_country_cow_code: Optional[str]
    vessel_status: Optional[str]
    violence_dummy: Optional[str]
    steaming_recode: Optional[str]
    incident_type_recode: Optional[str]
    incident_action_recode: Optional[str]


class IncidentFilter(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    begin_date: Optional[date] = Field(default=None, alias="beginDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")

    @model_validator(mode="after")
    def check_range(self):
        if self.begin_date and self.end_date and self.begin_date > self.end_date:
            raise ValueError("begin_date must not be after end_date")
        return self

    def is_empty(self) -> bool:
        return self.id is None and self.begin_date is None and self.end_date is None


class YearCount(BaseModel):
    year: int
    count: int
