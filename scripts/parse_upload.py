"""
Parse a station data file from CLI and print the outcome.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from dwlr_ingest.config import get_ingestion_settings
from dwlr_ingest.services.dataset_store import StationDatasetStore
from dwlr_ingest.services.upload_service import build_upload_service, truncate_errors
from dwlr_ingest.validators.station_validator import StationValidationError, build_station_info


def main() -> int:
    parser = argparse.ArgumentParser(description="Parse a CSV or JSON water level upload.")
    parser.add_argument("path", help="CSV or JSON file to parse.")
    parser.add_argument("--station-id", required=True)
    parser.add_argument("--station-name", required=True)
    parser.add_argument("--lat", dest="latitude", required=True)
    parser.add_argument("--lon", dest="longitude", required=True)
    parser.add_argument(
        "--all-errors",
        action="store_true",
        help="Print every row error instead of the display-capped list.",
    )
    args = parser.parse_args()

    try:
        station = build_station_info(
            station_id=args.station_id,
            station_name=args.station_name,
            latitude=args.latitude,
            longitude=args.longitude,
        )
    except StationValidationError as exc:
        print(json.dumps(exc.to_dict(), indent=2))
        return 2

    settings = get_ingestion_settings()
    service = build_upload_service(store=StationDatasetStore(), settings=settings)
    path = Path(args.path)
    outcome = service.ingest_upload(
        filename=path.name,
        content=path.read_bytes(),
        station=station,
    )

    errors = outcome.errors or []
    payload = {
        "success": outcome.success,
        "message": outcome.message,
        "data_points": [
            {
                "id": record.id,
                "timestamp": record.timestamp.isoformat(),
                "level": record.level,
                "status": record.status,
                "temperature": record.temperature,
                "ph": record.ph,
            }
            for record in outcome.data_points or []
        ],
        "errors": errors if args.all_errors else truncate_errors(errors, settings.max_display_errors),
    }
    print(json.dumps(payload, indent=2))
    return 0 if outcome.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
