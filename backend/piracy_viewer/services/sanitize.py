# piracy_viewer/services/sanitize.py

import math
import re
from datetime import date, datetime
from typing import Any, List, Mapping, Optional, cast

from ..models.incident import IncidentRecord

# gviz date literal, month is zero-based: 'Date(2012,2,4)' is 4 March 2012
_GVIZ_DATE_RE = re.compile(r"^Date\((\d{4}),\s*(\d{1,2}),\s*(\d{1,2})(?:,[\d,\s]*)?\)$")
_US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def parse_sheet_date(value: Any) -> Optional[date]:
    """
    Parse the date forms the sheet endpoint hands back:
    '3/4/2012' (display format, month first), 'Date(2012,2,4)' and
    ISO '2012-03-04'. Return None if missing/invalid.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None

    text = str(value).strip()
    try:
        m = _US_DATE_RE.match(text)
        if m:
            month, day, year = (int(g) for g in m.groups())
            return date(year, month, day)

        m = _GVIZ_DATE_RE.match(text)
        if m:
            year, month0, day = (int(g) for g in m.groups())
            return date(year, month0 + 1, day)

        return datetime.fromisoformat(text.rstrip("Z")).date()
    except ValueError:
        return None


def parse_float(value: Any) -> Optional[float]:
    """
    Safely parse floats, ignoring blanks and values like 'unknown'.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def sanitize_incident(record: Mapping[str, Any]) -> IncidentRecord:
    """
    Return a normalized copy of one raw incident row.

    Rows carrying an occurrence date get it parsed and their coordinates
    coerced to floats. Rows without one come back as an equal copy.
    """
    if not record.get("date_occurred"):
        return cast(IncidentRecord, dict(record))

    sanitized = cast(IncidentRecord, dict(record))
    sanitized["date_occurred"] = parse_sheet_date(record["date_occurred"])
    sanitized["latitude"] = parse_float(record.get("latitude"))
    sanitized["longitude"] = parse_float(record.get("longitude"))
    return sanitized


def sanitize_incidents(records: List[Mapping[str, Any]]) -> List[IncidentRecord]:
    return [sanitize_incident(r) for r in records]
