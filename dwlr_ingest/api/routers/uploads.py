"""
dwlr_ingest/api/routers/uploads.py

Station data upload HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile, status

from dwlr_ingest.api.dependencies import (
    get_data_upload,
    get_dataset_store,
    get_settings,
    get_upload_service,
)
from dwlr_ingest.config import IngestionSettings
from dwlr_ingest.schemas.upload import (
    StationDatasetResponse,
    StationListResponse,
    UploadResultResponse,
    WaterLevelDataResponse,
)
from dwlr_ingest.services.dataset_store import StationDatasetStore
from dwlr_ingest.services.upload_service import UploadIngestionService
from dwlr_ingest.validators.station_validator import StationValidationError, build_station_info

router = APIRouter(tags=["uploads"])


@router.post("/stations/{station_id}/uploads", response_model=UploadResultResponse)
def upload_station_data(
    station_id: str,
    file: UploadFile = Depends(get_data_upload),
    station_name: str = Form(default=""),
    latitude: str = Form(default=""),
    longitude: str = Form(default=""),
    upload_service: UploadIngestionService = Depends(get_upload_service),
    settings: IngestionSettings = Depends(get_settings),
) -> UploadResultResponse:
    """
    Parse one CSV or JSON file for a station and store it on success.
    """

    try:
        station = build_station_info(
            station_id=station_id,
            station_name=station_name,
            latitude=latitude,
            longitude=longitude,
        )
        # One extra byte lets the service detect oversized uploads.
        content = file.file.read(settings.max_upload_bytes + 1)
    except StationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    finally:
        file.file.close()

    outcome = upload_service.ingest_upload(
        filename=file.filename or "",
        content=content,
        station=station,
    )
    response = UploadResultResponse.from_outcome(
        outcome,
        max_display_errors=settings.max_display_errors,
    )
    if not outcome.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=response.model_dump(mode="json"),
        )
    return response


@router.get("/stations", response_model=StationListResponse)
def list_stations(
    store: StationDatasetStore = Depends(get_dataset_store),
) -> StationListResponse:
    return StationListResponse(station_ids=store.station_ids())


@router.get("/stations/{station_id}/data", response_model=StationDatasetResponse)
def get_station_data(
    station_id: str,
    store: StationDatasetStore = Depends(get_dataset_store),
) -> StationDatasetResponse:
    """
    Return the most recent accepted upload for a station.
    """

    dataset = store.get(station_id)
    if dataset is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No uploaded data for station '{station_id}'.",
        )

    return StationDatasetResponse(
        station_id=dataset.station.station_id,
        station_name=dataset.station.station_name,
        coordinates=dataset.station.coordinates,
        source_filename=dataset.source_filename,
        uploaded_at=dataset.uploaded_at,
        data_points=[WaterLevelDataResponse.from_record(record) for record in dataset.data_points],
    )


@router.delete("/stations/{station_id}/data", status_code=status.HTTP_204_NO_CONTENT)
def delete_station_data(
    station_id: str,
    store: StationDatasetStore = Depends(get_dataset_store),
) -> None:
    if not store.remove(station_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No uploaded data for station '{station_id}'.",
        )
