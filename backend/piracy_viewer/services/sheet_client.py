# piracy_viewer/services/sheet_client.py

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..config import SHEET_REQUEST_TIMEOUT
from .errors import InvalidSourceError, QueryExecutionError

log = logging.getLogger(__name__)

# Google Visualization query endpoint for a sheet
GVIZ_URL = "https://docs.google.com/spreadsheets/d/{key}/gviz/tq"

_KEY_RE = re.compile(r"/spreadsheets/d/([\w-]+)")
_GID_RE = re.compile(r"[?#&]gid=(\d+)")

# Body looks like: /*O_o*/\ngoogle.visualization.Query.setResponse({...});
_ENVELOPE_RE = re.compile(r"setResponse\((.*)\)\s*;?\s*$", re.DOTALL)

Record = Dict[str, Optional[str]]


def parse_sheet_url(source_url: str) -> Tuple[str, Optional[str]]:
    """
    Pull the spreadsheet key and (optional) gid out of a sheet URL like
    'https://docs.google.com/spreadsheets/d/<key>/edit#gid=0'.
    """
    m = _KEY_RE.search(source_url or "")
    if not m:
        raise InvalidSourceError(f"Not a Google Sheets URL: {source_url!r}")
    gid = _GID_RE.search(source_url)
    return m.group(1), gid.group(1) if gid else None


def _unwrap(body: str) -> Dict[str, Any]:
    m = _ENVELOPE_RE.search(body)
    payload = m.group(1) if m else body
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise QueryExecutionError(f"Unreadable response from sheet endpoint: {e}") from e

    if not isinstance(data, dict):
        raise QueryExecutionError(
            f"Unexpected response shape from sheet endpoint: {type(data).__name__}"
        )
    return data


def _cell_text(cell: Optional[Dict[str, Any]], col_type: str) -> Optional[str]:
    """
    Numbers come from the raw value ('f' may carry thousands separators);
    dates and everything else prefer the sheet's formatted text.
    """
    if cell is None:
        return None

    value = cell.get("v")
    if col_type != "number" and cell.get("f") is not None:
        return str(cell["f"])
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def table_to_records(table: Dict[str, Any]) -> List[Record]:
    cols = table.get("cols") or []
    keys = [c.get("label") or c.get("id") for c in cols]
    types = [c.get("type", "string") for c in cols]

    records: List[Record] = []
    for row in table.get("rows") or []:
        cells = row.get("c") or []
        record: Record = {}
        for i, key in enumerate(keys):
            cell = cells[i] if i < len(cells) else None
            record[key] = _cell_text(cell, types[i])
        records.append(record)
    return records


class SheetQueryExecutor:
    """
    Runs rendered queries against a Google Sheet and returns rows as
    dicts keyed by column header.

    Pass `client` to share a connection pool (or a mock transport in
    tests); otherwise a short-lived client is opened per query.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = SHEET_REQUEST_TIMEOUT,
    ):
        self.client = client
        self.timeout = timeout

    async def _get(self, url: str, params: Dict[str, str]) -> httpx.Response:
        if self.client is not None:
            return await self.client.get(url, params=params)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params)

    async def execute(
        self, source_url: str, query: str, limit: Optional[int] = None
    ) -> List[Record]:
        key, gid = parse_sheet_url(source_url)

        tq = query if limit is None else f"{query} limit {int(limit)}"
        params = {"tq": tq, "tqx": "out:json", "headers": "1"}
        if gid is not None:
            params["gid"] = gid

        log.debug("[SheetQueryExecutor] %s tq=%s", key, tq)

        try:
            resp = await self._get(GVIZ_URL.format(key=key), params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.error(
                "[SheetQueryExecutor] HTTP error %s %s",
                e.response.status_code,
                e.response.text[:200],
            )
            raise QueryExecutionError(
                f"Sheet endpoint returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            log.error("[SheetQueryExecutor] Request failed: %s", e)
            raise QueryExecutionError(f"Sheet endpoint unreachable: {e}") from e

        payload = _unwrap(resp.text)

        if payload.get("status") == "error":
            errors = payload.get("errors") or [{}]
            first = errors[0] if isinstance(errors, list) and isinstance(errors[0], dict) else {}
            message = first.get("detailed_message") or first.get("message") or "unknown error"
            log.error("[SheetQueryExecutor] Query rejected: %s (tq=%s)", message, tq)
            raise QueryExecutionError(message)

        table = payload.get("table") or {}
        if not isinstance(table, dict):
            raise QueryExecutionError(
                f"Unexpected table shape from sheet endpoint: {type(table).__name__}"
            )

        records = table_to_records(table)
        if limit is not None:
            records = records[: int(limit)]

        log.info("[SheetQueryExecutor] Fetched %d rows from %s", len(records), key)
        return records
