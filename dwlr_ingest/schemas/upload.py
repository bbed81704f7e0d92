"""
dwlr_ingest/schemas/upload.py

Response schemas for upload and dataset endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from dwlr_ingest.domain.water_level import ParseOutcome, WaterLevelData
from dwlr_ingest.services.upload_service import truncate_errors


class WaterLevelDataResponse(BaseModel):
    """
    API response model for one canonical reading.
    """

    id: str
    timestamp: datetime
    level: float
    location: str
    coordinates: tuple[float, float]
    status: str
    temperature: float | None = None
    ph: float | None = None

    @classmethod
    def from_record(cls, record: WaterLevelData) -> WaterLevelDataResponse:
        return cls(
            id=record.id,
            timestamp=record.timestamp,
            level=record.level,
            location=record.location,
            coordinates=record.coordinates,
            status=record.status,
            temperature=record.temperature,
            ph=record.ph,
        )


class UploadResultResponse(BaseModel):
    """
    API response model for one parsed upload.

    ``errors`` is complete; ``display_errors`` is capped for presentation.
    """

    success: bool
    message: str
    data_point_count: int = Field(..., ge=0)
    date_range_start: datetime | None = None
    date_range_end: datetime | None = None
    data_points: list[WaterLevelDataResponse] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    display_errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: ParseOutcome, *, max_display_errors: int) -> UploadResultResponse:
        data_points = outcome.data_points or []
        return cls(
            success=outcome.success,
            message=outcome.message,
            data_point_count=len(data_points),
            date_range_start=data_points[0].timestamp if data_points else None,
            date_range_end=data_points[-1].timestamp if data_points else None,
            data_points=[WaterLevelDataResponse.from_record(record) for record in data_points],
            errors=list(outcome.errors or []),
            display_errors=truncate_errors(outcome.errors, max_display_errors),
        )


class StationDatasetResponse(BaseModel):
    """
    API response model for a stored station dataset.
    """

    station_id: str
    station_name: str
    coordinates: tuple[float, float]
    source_filename: str
    uploaded_at: datetime
    data_points: list[WaterLevelDataResponse] = Field(default_factory=list)


class StationListResponse(BaseModel):
    station_ids: list[str] = Field(default_factory=list)
