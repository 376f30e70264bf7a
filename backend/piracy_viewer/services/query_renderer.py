# piracy_viewer/services/query_renderer.py
import re
from typing import Mapping

# Quoted literals are copied through untouched
_LITERAL_RE = re.compile(r"""('[^']*'|"[^"]*")""")


def _name_pattern(column_map: Mapping[str, str]) -> re.Pattern:
    # Longest first so incident_type_recode wins over incident_type
    names = sorted(column_map, key=len, reverse=True)
    return re.compile(r"\b(" + "|".join(re.escape(n) for n in names) + r")\b")


def render_query(column_map: Mapping[str, str], template: str) -> str:
    """
    Rewrite a query written with semantic field names into one using
    sheet column letters.

        >>> render_query({"id": "A", "date_occurred": "B"},
        ...              "select id order by date_occurred desc")
        'select A order by B desc'
    """
    if not column_map:
        return template

    pattern = _name_pattern(column_map)
    parts = _LITERAL_RE.split(template)

    # split() with one group puts the literals at odd indexes
    for i in range(0, len(parts), 2):
        parts[i] = pattern.sub(lambda m: column_map[m.group(1)], parts[i])

    return "".join(parts)
