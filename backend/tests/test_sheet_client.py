"""
SheetQueryExecutor against a mocked gviz endpoint.
"""

import json

import httpx
import pytest

from piracy_viewer.services.errors import InvalidSourceError, QueryExecutionError
from piracy_viewer.services.sheet_client import (
    SheetQueryExecutor,
    parse_sheet_url,
    table_to_records,
)

from conftest import SHEET_URL

TABLE = {
    "cols": [
        {"id": "A", "label": "id", "type": "number"},
        {"id": "B", "label": "date_occurred", "type": "date"},
        {"id": "J", "label": "latitude", "type": "number"},
        {"id": "K", "label": "", "type": "number"},
    ],
    "rows": [
        {"c": [{"v": 3.0, "f": "3"}, {"v": "Date(2012,2,4)", "f": "3/4/2012"}, {"v": 10.5}, {"v": -20.25}]},
        {"c": [{"v": 1234.0, "f": "1,234"}, None, {"v": None}, {"v": 1.0}]},
        {"c": [{"v": 5.0}, {"v": "Date(2001,0,1)"}]},
    ],
}


def gviz_body(payload):
    return "/*O_o*/\ngoogle.visualization.Query.setResponse(" + json.dumps(payload) + ");"


def make_executor(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SheetQueryExecutor(client=client), client


class TestParseSheetUrl:
    def test_key_and_fragment_gid(self):
        assert parse_sheet_url(SHEET_URL) == ("abc123-XYZ", "7")

    def test_query_string_gid(self):
        url = "https://docs.google.com/spreadsheets/d/KEY_1/edit?usp=sharing&gid=42"
        assert parse_sheet_url(url) == ("KEY_1", "42")

    def test_no_gid(self):
        assert parse_sheet_url("https://docs.google.com/spreadsheets/d/KEY/") == ("KEY", None)

    @pytest.mark.parametrize("url", ["", "https://example.com/data.csv", None])
    def test_rejects_other_urls(self, url):
        with pytest.raises(InvalidSourceError):
            parse_sheet_url(url)


class TestTableToRecords:
    def test_labels_and_values(self):
        records = table_to_records(TABLE)
        assert records[0] == {"id": "3", "date_occurred": "3/4/2012", "latitude": "10.5", "K": "-20.25"}

    def test_numbers_ignore_formatting_and_nulls(self):
        records = table_to_records(TABLE)
        assert records[1] == {"id": "1234", "date_occurred": None, "latitude": None, "K": "1"}

    def test_short_rows_pad_with_none(self):
        records = table_to_records(TABLE)
        assert records[2] == {"id": "5", "date_occurred": "Date(2001,0,1)", "latitude": None, "K": None}

    def test_empty_table(self):
        assert table_to_records({}) == []


@pytest.mark.anyio
class TestExecute:
    async def test_request_and_parse(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            return httpx.Response(200, text=gviz_body({"status": "ok", "table": TABLE}))

        executor, client = make_executor(handler)
        async with client:
            records = await executor.execute(SHEET_URL, "select A, B, J, K")

        assert len(records) == 3
        assert seen["url"].path == "/spreadsheets/d/abc123-XYZ/gviz/tq"
        assert seen["url"].params["tq"] == "select A, B, J, K"
        assert seen["url"].params["tqx"] == "out:json"
        assert seen["url"].params["gid"] == "7"

    async def test_limit_is_sent_and_enforced(self):
        seen = {}

        def handler(request):
            seen["tq"] = request.url.params["tq"]
            return httpx.Response(200, text=gviz_body({"status": "ok", "table": TABLE}))

        executor, client = make_executor(handler)
        async with client:
            records = await executor.execute(SHEET_URL, "select A order by B desc", limit=2)

        assert seen["tq"] == "select A order by B desc limit 2"
        assert len(records) == 2

    async def test_plain_json_body(self):
        def handler(request):
            return httpx.Response(200, json={"status": "ok", "table": TABLE})

        executor, client = make_executor(handler)
        async with client:
            records = await executor.execute(SHEET_URL, "select *")
        assert records[0]["id"] == "3"

    async def test_query_error_status(self):
        payload = {
            "status": "error",
            "errors": [{"reason": "invalid_query", "detailed_message": "Invalid query: NO_COLUMN: ZZ"}],
        }

        def handler(request):
            return httpx.Response(200, text=gviz_body(payload))

        executor, client = make_executor(handler)
        async with client:
            with pytest.raises(QueryExecutionError, match="NO_COLUMN"):
                await executor.execute(SHEET_URL, "select ZZ")

    async def test_http_error(self):
        def handler(request):
            return httpx.Response(404, text="not found")

        executor, client = make_executor(handler)
        async with client:
            with pytest.raises(QueryExecutionError, match="404"):
                await executor.execute(SHEET_URL, "select *")

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        executor, client = make_executor(handler)
        async with client:
            with pytest.raises(QueryExecutionError, match="unreachable"):
                await executor.execute(SHEET_URL, "select *")

    async def test_garbage_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>sign in</html>")

        executor, client = make_executor(handler)
        async with client:
            with pytest.raises(QueryExecutionError):
                await executor.execute(SHEET_URL, "select *")

    async def test_bad_source_fails_before_request(self):
        def handler(request):
            raise AssertionError("should not be called")

        executor, client = make_executor(handler)
        async with client:
            with pytest.raises(InvalidSourceError):
                await executor.execute("https://example.com/", "select *")

    async def test_non_object_body(self):
        def handler(request):
            return httpx.Response(200, text="google.visualization.Query.setResponse([]);")

        executor, client = make_executor(handler)
        async with client:
            with pytest.raises(QueryExecutionError, match="Unexpected response shape"):
                await executor.execute(SHEET_URL, "select *")

    async def test_non_object_table(self):
        def handler(request):
            return httpx.Response(200, text=gviz_body({"status": "ok", "table": [1, 2]}))

        executor, client = make_executor(handler)
        async with client:
            with pytest.raises(QueryExecutionError, match="Unexpected table shape"):
                await executor.execute(SHEET_URL, "select *")
