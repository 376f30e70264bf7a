"""
Shared fixtures: a canned query executor, an IncidentService wired to it,
and a FastAPI TestClient with the service injected.
"""

import pytest

SHEET_URL = "https://docs.google.com/spreadsheets/d/abc123-XYZ/edit#gid=7"


class FakeExecutor:
    """Stands in for SheetQueryExecutor; records every rendered query."""

    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.calls = []

    async def execute(self, source_url, query, limit=None):
        self.calls.append((source_url, query, limit))
        if self.error is not None:
            raise self.error
        rows = [dict(r) for r in self.rows]
        return rows if limit is None else rows[:limit]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def data_sources_file(tmp_path):
    path = tmp_path / "data-sources.json"
    path.write_text(
        '[{"name": "Piracy incidents", "url": "%s", "default": true, "owner": "MPEL"}]'
        % SHEET_URL,
        encoding="utf-8",
    )
    return path


@pytest.fixture
def service(executor, data_sources_file):
    from piracy_viewer.services.incident_service import IncidentService

    return IncidentService(executor=executor, data_sources_location=str(data_sources_file))


@pytest.fixture
def client(service):
    from fastapi.testclient import TestClient

    from piracy_viewer.dependencies import get_incident_service
    from piracy_viewer.main import app

    app.dependency_overrides[get_incident_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
