import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS, DATA_SOURCES_LOCATION, LOG_LEVEL, SHEET_REQUEST_TIMEOUT
from .routers import incidents as incidents_router
from .routers import stats as stats_router
from .services.incident_service import IncidentService
from .services.sheet_client import SheetQueryExecutor

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pooled client for the sheet endpoint for the life of the app
    async with httpx.AsyncClient(timeout=SHEET_REQUEST_TIMEOUT) as client:
        app.state.incident_service = IncidentService(
            executor=SheetQueryExecutor(client=client),
            data_sources_location=DATA_SOURCES_LOCATION,
            http_client=client,
        )
        yield


app = FastAPI(title="Maritime Piracy Viewer Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(incidents_router.router, prefix="/incidents", tags=["incidents"])
app.include_router(stats_router.router, tags=["stats"])
