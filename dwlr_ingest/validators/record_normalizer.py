"""
dwlr_ingest/validators/record_normalizer.py

Row-level type coercion, defaulting and status inference for uploads.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from dwlr_ingest.domain.water_level import (
    RowError,
    RowErrorCode,
    StationInfo,
    WaterLevelData,
    WaterLevelStatus,
)
from dwlr_ingest.mappers.schema_detector import (
    ROLE_COORDINATES,
    ROLE_LEVEL,
    ROLE_LOCATION,
    ROLE_PH,
    ROLE_STATUS,
    ROLE_TEMPERATURE,
    ROLE_TIMESTAMP,
    FieldRoleMap,
    SchemaDetector,
)

TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M",
    "%m/%d/%Y %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%d-%b-%Y",
    "%d-%b-%Y %H:%M",
    "%b %d %Y",
    "%B %d, %Y",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S.%f%z",
)

# Day 25569 of the 1899-12-30 spreadsheet calendar is 1970-01-01.
SPREADSHEET_UNIX_EPOCH_SERIAL = 25569
SECONDS_PER_DAY = 86400
_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_COORDINATE_SPLIT_RE = re.compile(r"[;,\s]+")

CSV_ROW_MESSAGES: dict[str, str] = {
    RowErrorCode.COLUMN_COUNT_MISMATCH: "Column count mismatch",
    RowErrorCode.INVALID_TIMESTAMP: "Invalid timestamp format",
    RowErrorCode.INVALID_LEVEL: "Invalid water level value",
}

JSON_ITEM_MESSAGES: dict[str, str] = {
    RowErrorCode.NOT_AN_OBJECT: "Must be an object",
    RowErrorCode.INVALID_TIMESTAMP: "Invalid timestamp",
    RowErrorCode.INVALID_LEVEL: "Invalid water level",
}

NormalizeResult = tuple[WaterLevelData | None, RowError | None]


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a calendar string or spreadsheet serial date into an aware datetime.

    Text containing ``/`` or ``-`` is treated as a calendar date. Anything else
    is first tried as a spreadsheet serial day number. Naive values are UTC.
    """

    if value is None or isinstance(value, bool):
        return None
    raw = str(value).strip()
    if not raw:
        return None

    if "/" in raw or "-" in raw:
        return _parse_calendar(raw)

    serial = _parse_finite_float(raw)
    if serial is not None:
        return _from_spreadsheet_serial(serial)
    return _parse_calendar(raw)


def parse_level(value: Any) -> float | None:
    """
    Return a finite float or None.
    """

    return _parse_finite_float(value)


def parse_coordinates(value: Any) -> tuple[float, float] | None:
    """
    Parse a latitude/longitude pair from a sequence or a delimited string.
    """

    if isinstance(value, str):
        parts: list[Any] = [part for part in _COORDINATE_SPLIT_RE.split(value.strip()) if part]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        return None

    if len(parts) != 2:
        return None
    latitude = _parse_finite_float(parts[0])
    longitude = _parse_finite_float(parts[1])
    if latitude is None or longitude is None:
        return None
    return latitude, longitude


def _parse_calendar(raw: str) -> datetime | None:
    normalized = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(raw, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _from_spreadsheet_serial(serial: float) -> datetime | None:
    seconds = (serial - SPREADSHEET_UNIX_EPOCH_SERIAL) * SECONDS_PER_DAY
    try:
        return _UNIX_EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        return None


def _parse_finite_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        # float() also takes Python literal underscores such as "2_05.5".
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class RecordNormalizer:
    """
    Converts one raw CSV row or JSON item into a WaterLevelData record.

    The normalizer is stateless; the caller supplies the running mean of the
    levels it has accepted so far.
    """

    def __init__(
        self,
        *,
        status_warning_offset: float = 2.0,
        status_critical_offset: float = 5.0,
    ) -> None:
        self._warning_offset = status_warning_offset
        self._critical_offset = status_critical_offset

    def normalize_csv_row(
        self,
        *,
        line: str,
        header_count: int,
        role_map: FieldRoleMap,
        ordinal: int,
        station: StationInfo,
        running_average_level: float | None,
    ) -> NormalizeResult:
        """
        Normalize one comma-separated data line.
        """

        values = [value.strip() for value in line.split(",")]
        if len(values) != header_count:
            return None, self._error(RowErrorCode.COLUMN_COUNT_MISMATCH, CSV_ROW_MESSAGES)

        fields = {role: values[index] for role, index in role_map.resolved_roles().items()}
        return self._build_record(
            fields=fields,
            ordinal=ordinal,
            station=station,
            running_average_level=running_average_level,
            messages=CSV_ROW_MESSAGES,
        )

    def normalize_json_item(
        self,
        *,
        item: Any,
        ordinal: int,
        station: StationInfo,
        running_average_level: float | None,
    ) -> NormalizeResult:
        """
        Normalize one JSON array element, resolving roles against its own keys.
        """

        if not isinstance(item, dict):
            return None, self._error(RowErrorCode.NOT_AN_OBJECT, JSON_ITEM_MESSAGES)

        present_keys = [key for key, value in item.items() if value is not None]
        role_map = SchemaDetector.detect_item(present_keys)
        fields = {role: item[key] for role, key in role_map.resolved_roles().items()}
        return self._build_record(
            fields=fields,
            ordinal=ordinal,
            station=station,
            running_average_level=running_average_level,
            messages=JSON_ITEM_MESSAGES,
        )

    def classify_level(self, level: float, running_average_level: float | None) -> str:
        """
        Classify a level against the mean of previously accepted levels.
        """

        mean = level if running_average_level is None else running_average_level
        if level > mean + self._critical_offset:
            return WaterLevelStatus.CRITICAL
        if level > mean + self._warning_offset:
            return WaterLevelStatus.WARNING
        return WaterLevelStatus.NORMAL

    def _build_record(
        self,
        *,
        fields: Mapping[str, Any],
        ordinal: int,
        station: StationInfo,
        running_average_level: float | None,
        messages: Mapping[str, str],
    ) -> NormalizeResult:
        timestamp = parse_timestamp(fields.get(ROLE_TIMESTAMP))
        if timestamp is None:
            return None, self._error(RowErrorCode.INVALID_TIMESTAMP, messages)

        level = parse_level(fields.get(ROLE_LEVEL))
        if level is None:
            return None, self._error(RowErrorCode.INVALID_LEVEL, messages)

        record = WaterLevelData(
            id=f"{station.station_id}-uploaded-{ordinal}",
            timestamp=timestamp,
            level=level,
            location=self._parse_location(fields.get(ROLE_LOCATION), station.station_name),
            coordinates=parse_coordinates(fields.get(ROLE_COORDINATES)) or station.coordinates,
            status=self._resolve_status(fields.get(ROLE_STATUS), level, running_average_level),
            temperature=_parse_finite_float(fields.get(ROLE_TEMPERATURE)),
            ph=_parse_finite_float(fields.get(ROLE_PH)),
        )
        return record, None

    def _resolve_status(
        self,
        raw_status: Any,
        level: float,
        running_average_level: float | None,
    ) -> str:
        if isinstance(raw_status, str):
            explicit = raw_status.strip().lower()
            if explicit:
                return explicit
        return self.classify_level(level, running_average_level)

    @staticmethod
    def _parse_location(value: Any, default: str) -> str:
        if value is None:
            return default
        text = str(value).strip()
        return text or default

    @staticmethod
    def _error(code: str, messages: Mapping[str, str]) -> RowError:
        return RowError(code=code, message=messages[code])
