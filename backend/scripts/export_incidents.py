import argparse
import asyncio
import json
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parents[1] / ".env")

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(BASE_DIR))

from piracy_viewer.config import DATA_SOURCES_LOCATION, DEFAULT_SHEET_URL  # noqa: E402
from piracy_viewer.models.incident import IncidentFilter  # noqa: E402
from piracy_viewer.services.incident_service import IncidentService  # noqa: E402
from piracy_viewer.services.sheet_client import SheetQueryExecutor  # noqa: E402


async def export(args) -> dict:
    service = IncidentService(
        executor=SheetQueryExecutor(),
        data_sources_location=DATA_SOURCES_LOCATION,
    )

    incident_filter = IncidentFilter(
        id=args.id, begin_date=args.begin_date, end_date=args.end_date
    )
    if incident_filter.is_empty():
        fc = await service.get_default_incidents(args.source)
    else:
        fc = await service.get_incidents(args.source, incident_filter, args.fields)

    return fc.model_dump(mode="json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Export piracy incidents from the sheet as GeoJSON.")
    parser.add_argument("--source", default=DEFAULT_SHEET_URL, help="Google Sheet URL.")
    parser.add_argument("--id", type=int, help="Single incident id.")
    parser.add_argument("--begin-date", type=date.fromisoformat, help="YYYY-MM-DD, inclusive.")
    parser.add_argument("--end-date", type=date.fromisoformat, help="YYYY-MM-DD, inclusive.")
    parser.add_argument("--fields", nargs="+", default=["*"], help="Fields to select.")
    parser.add_argument("-o", "--output", help="Write to this file instead of stdout.")
    args = parser.parse_args()

    if not args.source:
        parser.error("--source is required when DEFAULT_SHEET_URL is not set")

    geojson = asyncio.run(export(args))
    text = json.dumps(geojson, indent=2)

    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Wrote {len(geojson['features'])} features to {args.output}")
    else:
        print(text)


if __name__ == "__main__":
    main()
