"""
dwlr_ingest/services/upload_service.py

Service layer for station data uploads.

The service is the pipeline's caller: it picks the CSV or JSON path from the
file extension, decodes the payload, runs the batch validator and stores a
successful dataset in the caller-owned StationDatasetStore.
"""

from __future__ import annotations

import logging
from pathlib import PurePath

from dwlr_ingest.config import IngestionSettings, get_ingestion_settings
from dwlr_ingest.domain.water_level import ParseOutcome, SourceFormat, StationInfo
from dwlr_ingest.logging_utils import log_event
from dwlr_ingest.services.dataset_store import StationDatasetStore
from dwlr_ingest.services.result_assembler import failure
from dwlr_ingest.validators.batch_validator import BatchValidator
from dwlr_ingest.validators.record_normalizer import RecordNormalizer

logger = logging.getLogger(__name__)

UNSUPPORTED_FORMAT_MESSAGE = "Unsupported file format. Please upload CSV or JSON files only."

_EXTENSION_FORMATS: dict[str, str] = {
    ".csv": SourceFormat.CSV,
    ".json": SourceFormat.JSON,
}


class UploadReadError(ValueError):
    """
    Raised when upload bytes cannot be turned into text.
    """


def detect_source_format(filename: str | None) -> str | None:
    """
    Return ``csv`` or ``json`` from the file extension, or None.
    """

    suffix = PurePath((filename or "").strip()).suffix.lower()
    return _EXTENSION_FORMATS.get(suffix)


def truncate_errors(errors: list[str] | None, limit: int) -> list[str]:
    """
    Return at most ``limit`` errors plus a trailing "... and N more errors" line.
    """

    if not errors:
        return []
    shown = list(errors[: max(0, limit)])
    hidden = len(errors) - len(shown)
    if hidden > 0:
        shown.append(f"... and {hidden} more errors")
    return shown


class UploadIngestionService:
    """
    Coordinates format dispatch, decoding, validation and dataset storage.
    """

    def __init__(
        self,
        *,
        store: StationDatasetStore,
        max_upload_bytes: int,
        batch_validator: BatchValidator | None = None,
    ) -> None:
        self._store = store
        self._max_upload_bytes = max(1, max_upload_bytes)
        self._batch_validator = batch_validator or BatchValidator()

    @property
    def store(self) -> StationDatasetStore:
        return self._store

    def ingest_upload(
        self,
        *,
        filename: str,
        content: bytes | str,
        station: StationInfo,
    ) -> ParseOutcome:
        """
        Parse one uploaded file and store its dataset on success.

        Every failure is reported through the returned ParseOutcome.
        """

        source_format = detect_source_format(filename)
        if source_format is None:
            logger.info("Rejected upload with unsupported extension filename=%r", filename)
            return failure(UNSUPPORTED_FORMAT_MESSAGE)

        try:
            text = self._decode(content)
        except UploadReadError as exc:
            logger.info("Rejected unreadable upload filename=%r: %s", filename, exc)
            return failure(f"Error reading file: {exc}")

        outcome = self.parse_text(text=text, source_format=source_format, station=station)

        if outcome.success and outcome.data_points:
            self._store.put(
                station=station,
                data_points=outcome.data_points,
                source_filename=filename,
            )

        log_event(
            logger,
            logging.INFO,
            "upload_ingested",
            station_id=station.station_id,
            filename=filename,
            success=outcome.success,
            data_points=outcome.data_point_count,
            errors=outcome.error_count,
        )
        return outcome

    def parse_text(self, *, text: str, source_format: str, station: StationInfo) -> ParseOutcome:
        """
        Run the pipeline on already-decoded text without touching the store.
        """

        if source_format == SourceFormat.CSV:
            return self._batch_validator.validate_csv(content=text, station=station)
        if source_format == SourceFormat.JSON:
            return self._batch_validator.validate_json(content=text, station=station)
        return failure(UNSUPPORTED_FORMAT_MESSAGE)

    def _decode(self, content: bytes | str) -> str:
        if isinstance(content, str):
            size = len(content.encode("utf-8", "surrogatepass"))
        else:
            size = len(content)
        if size > self._max_upload_bytes:
            raise UploadReadError(f"upload exceeds the {self._max_upload_bytes} byte limit")
        if isinstance(content, str):
            return content.lstrip("\ufeff")
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise UploadReadError("file must be UTF-8 encoded") from exc


def build_upload_service(
    *,
    store: StationDatasetStore,
    settings: IngestionSettings | None = None,
) -> UploadIngestionService:
    """
    Build the upload service for a caller-owned store with env-driven settings.
    """

    settings = settings or get_ingestion_settings()
    normalizer = RecordNormalizer(
        status_warning_offset=settings.status_warning_offset,
        status_critical_offset=settings.status_critical_offset,
    )
    return UploadIngestionService(
        store=store,
        max_upload_bytes=settings.max_upload_bytes,
        batch_validator=BatchValidator(
            normalizer=normalizer,
            log_row_errors=settings.log_row_errors,
        ),
    )
