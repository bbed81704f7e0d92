"""
dwlr_ingest/domain/water_level.py

Domain models used by the upload ingestion flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


class WaterLevelStatus:
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


KNOWN_STATUSES: frozenset[str] = frozenset(
    {
        WaterLevelStatus.NORMAL,
        WaterLevelStatus.WARNING,
        WaterLevelStatus.CRITICAL,
    }
)


class SourceFormat:
    CSV = "csv"
    JSON = "json"


class RowErrorCode:
    COLUMN_COUNT_MISMATCH = "column_count_mismatch"
    INVALID_TIMESTAMP = "invalid_timestamp"
    INVALID_LEVEL = "invalid_level"
    NOT_AN_OBJECT = "not_an_object"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class StationInfo:
    """
    Caller-supplied station metadata for one upload.
    """

    station_id: str
    station_name: str
    coordinates: tuple[float, float]


@dataclass(frozen=True)
class WaterLevelData:
    """
    Canonical, typed water level reading.
    """

    id: str
    timestamp: datetime
    level: float
    location: str
    coordinates: tuple[float, float]
    status: str
    temperature: float | None = None
    ph: float | None = None


@dataclass(frozen=True)
class RowError:
    """
    Why one row or item could not be normalized.
    """

    code: str
    message: str


@dataclass(frozen=True)
class ParseOutcome:
    """
    Verdict for one uploaded file.

    ``data_points`` is only set on success and is sorted by timestamp.
    ``errors`` is only set when at least one row failed and is never truncated.
    """

    success: bool
    message: str
    data_points: list[WaterLevelData] | None = None
    errors: list[str] | None = None

    @property
    def data_point_count(self) -> int:
        return len(self.data_points or [])

    @property
    def error_count(self) -> int:
        return len(self.errors or [])
