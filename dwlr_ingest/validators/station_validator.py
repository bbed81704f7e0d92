"""
dwlr_ingest/validators/station_validator.py

Validation of caller-supplied station metadata.
"""

from __future__ import annotations

import math
from typing import Any

from dwlr_ingest.domain.water_level import StationInfo

MISSING_STATION_FIELDS_MESSAGE = "Please fill in all station information fields before uploading data"


class StationValidationError(ValueError):
    """
    Raised when station metadata is incomplete or coordinates are invalid.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "field": self.field}


def build_station_info(
    *,
    station_id: Any,
    station_name: Any,
    latitude: Any,
    longitude: Any,
) -> StationInfo:
    """
    Build StationInfo from raw form values.
    """

    raw_values = {
        "station_id": station_id,
        "station_name": station_name,
        "latitude": latitude,
        "longitude": longitude,
    }
    for field, value in raw_values.items():
        if value is None or str(value).strip() == "":
            raise StationValidationError(MISSING_STATION_FIELDS_MESSAGE, field=field)

    lat = _parse_coordinate(latitude, field="latitude", limit=90.0)
    lon = _parse_coordinate(longitude, field="longitude", limit=180.0)
    return StationInfo(
        station_id=str(station_id).strip(),
        station_name=str(station_name).strip(),
        coordinates=(lat, lon),
    )


def _parse_coordinate(value: Any, *, field: str, limit: float) -> float:
    try:
        number = float(str(value).strip())
    except ValueError as exc:
        raise StationValidationError(f"{field.capitalize()} must be a number.", field=field) from exc

    if not math.isfinite(number):
        raise StationValidationError(f"{field.capitalize()} must be a finite number.", field=field)
    if abs(number) > limit:
        raise StationValidationError(
            f"{field.capitalize()} must be between -{limit:g} and {limit:g}.",
            field=field,
        )
    return number
