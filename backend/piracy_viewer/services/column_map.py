# piracy_viewer/services/column_map.py
import re
from collections.abc import Mapping
from typing import Dict, Iterator, Optional

_LETTERS_RE = re.compile(r"^[A-Z]+$")


class ColumnMap(Mapping):
    """
    Read-only translation table from semantic field names to sheet
    column letters.

    Queries are written against field names and rendered to letters at
    the last moment, so reordering the sheet only means editing this map.
    """

    def __init__(self, columns: Mapping):
        bad = {name: letter for name, letter in columns.items() if not _LETTERS_RE.match(letter)}
        if bad:
            raise ValueError(f"Invalid column letters: {bad}")

        self._columns: Dict[str, str] = dict(columns)
        self._fields: Dict[str, str] = {letter: name for name, letter in self._columns.items()}
        if len(self._fields) != len(self._columns):
            raise ValueError("Column letters must be unique")

    def __getitem__(self, name: str) -> str:
        return self._columns[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"ColumnMap({self._columns!r})"

    def field_for(self, letter: str) -> Optional[str]:
        return self._fields.get(letter)


DEFAULT_COLUMN_MAP = ColumnMap(
    {
        "id": "A",
        "date_occurred": "B",
        "time_of_day": "C",
        "time_of_day_recode": "D",
        "incident_type": "E",
        "incident_action": "F",
        "territorial_water_status": "G",
        "closest_coastal_state": "H",
        "closest_coastal_state_cow_code": "I",
        "latitude": "J",
        "longitude": "K",
        "location_precision": "L",
        "geolocation_source_imb": "M",
        "geolocation_source_imo": "N",
        "geolocation_source_asam": "O",
        "location_description": "P",
        "vessel_name": "Q",
        "vessel_country": "R",
        "vessel_country_cow_code": "S",
        "vessel_status": "T",
        "violence_dummy": "U",
        "steaming_recode": "V",
        "incident_type_recode": "W",
        "incident_action_recode": "X",
    }
)
