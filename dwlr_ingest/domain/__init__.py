"""
dwlr_ingest/domain package marker.
"""

from dwlr_ingest.domain.water_level import (
    KNOWN_STATUSES,
    ParseOutcome,
    RowError,
    RowErrorCode,
    SourceFormat,
    StationInfo,
    WaterLevelData,
    WaterLevelStatus,
)

__all__ = [
    "KNOWN_STATUSES",
    "ParseOutcome",
    "RowError",
    "RowErrorCode",
    "SourceFormat",
    "StationInfo",
    "WaterLevelData",
    "WaterLevelStatus",
]
