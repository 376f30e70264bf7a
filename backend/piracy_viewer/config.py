import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parents[1]  # .../backend

# Google Sheet holding the incident table; used when a request names no source
DEFAULT_SHEET_URL = os.getenv("DEFAULT_SHEET_URL")

# Path or http(s) URL of the static data-source listing
DATA_SOURCES_LOCATION = os.getenv(
    "DATA_SOURCES_LOCATION", str(BASE_DIR / "data" / "data-sources.json")
)

SHEET_REQUEST_TIMEOUT = float(os.getenv("SHEET_REQUEST_TIMEOUT", "30"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
