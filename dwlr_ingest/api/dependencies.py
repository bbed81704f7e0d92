"""
dwlr_ingest/api/dependencies.py

Shared FastAPI dependencies for request validation and app-owned services.
"""

from __future__ import annotations

from fastapi import File, HTTPException, Request, UploadFile, status

from dwlr_ingest.config import IngestionSettings, get_ingestion_settings
from dwlr_ingest.services.dataset_store import StationDatasetStore
from dwlr_ingest.services.upload_service import UploadIngestionService


def get_data_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Require an uploaded file with a filename.

    The extension itself is checked by the upload service so that an
    unsupported file still produces a regular parse outcome.
    """

    if not (file.filename or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file must have a filename.",
        )
    return file


def get_dataset_store(request: Request) -> StationDatasetStore:
    return request.app.state.dataset_store


def get_upload_service(request: Request) -> UploadIngestionService:
    return request.app.state.upload_service


def get_settings() -> IngestionSettings:
    return get_ingestion_settings()
