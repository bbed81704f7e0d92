"""
dwlr_ingest/validators/batch_validator.py

Drives the record normalizer over every row of one upload.

Status inference uses the running mean of levels accepted *earlier in the
same batch*, so rows are processed strictly in source order and re-ordering
the input can change the labels. The accumulator lives inside one call and
is never shared between uploads.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from dwlr_ingest.domain.water_level import (
    KNOWN_STATUSES,
    ParseOutcome,
    RowError,
    RowErrorCode,
    SourceFormat,
    StationInfo,
    WaterLevelData,
)
from dwlr_ingest.logging_utils import log_event
from dwlr_ingest.mappers.schema_detector import FieldRoleMap, SchemaDetector
from dwlr_ingest.services.result_assembler import assemble, failure
from dwlr_ingest.validators.record_normalizer import NormalizeResult, RecordNormalizer
from dwlr_ingest.validators.role_validator import SchemaDetectionError

logger = logging.getLogger(__name__)

CSV_MISSING_HEADER_MESSAGE = "CSV file must contain a header row"
JSON_NOT_ARRAY_MESSAGE = "JSON data must be an array of objects"

_EMPTY_MESSAGES: dict[str, str] = {
    SourceFormat.CSV: "No valid data points could be parsed from the file",
    SourceFormat.JSON: "No valid data points could be parsed from the JSON",
}

_ROW_LABELS: dict[str, str] = {
    SourceFormat.CSV: "Row",
    SourceFormat.JSON: "Item",
}


class BatchValidator:
    """
    Validates a whole upload, isolating per-row failures.
    """

    def __init__(
        self,
        *,
        normalizer: RecordNormalizer | None = None,
        detector: SchemaDetector | None = None,
        log_row_errors: bool = True,
    ) -> None:
        self._normalizer = normalizer or RecordNormalizer()
        self._detector = detector or SchemaDetector()
        self._log_row_errors = log_row_errors

    def validate_csv(self, *, content: str, station: StationInfo) -> ParseOutcome:
        """
        Parse CSV text whose first line is the header.
        """

        lines = content.strip().splitlines()
        return self.validate_all(
            raw_items=lines,
            station=station,
            source_format=SourceFormat.CSV,
        )

    def validate_json(self, *, content: str, station: StationInfo) -> ParseOutcome:
        """
        Parse JSON text holding a top-level array of reading objects.
        """

        # Oversized integer literals raise a plain ValueError, deep nesting a RecursionError.
        try:
            data = json.loads(content)
        except (ValueError, RecursionError) as exc:
            logger.info("Rejected JSON upload station=%s: %s", station.station_id, exc)
            return failure(f"Error parsing JSON: {exc}")

        if not isinstance(data, list):
            return failure(JSON_NOT_ARRAY_MESSAGE)

        return self.validate_all(
            raw_items=data,
            station=station,
            source_format=SourceFormat.JSON,
        )

    def validate_all(
        self,
        *,
        raw_items: Sequence[Any],
        station: StationInfo,
        source_format: str,
    ) -> ParseOutcome:
        """
        Normalize every row or item in source order.

        For CSV, ``raw_items`` are text lines with the header first; for JSON
        they are the decoded array elements.
        """

        role_map: FieldRoleMap | None = None
        header_count = 0
        items: Sequence[Any] = raw_items

        if source_format == SourceFormat.CSV:
            if not raw_items or not str(raw_items[0]).strip():
                return failure(CSV_MISSING_HEADER_MESSAGE)
            headers = str(raw_items[0]).split(",")
            try:
                role_map = self._detector.detect(headers)
            except SchemaDetectionError as exc:
                log_event(
                    logger,
                    logging.INFO,
                    "upload_schema_rejected",
                    station_id=station.station_id,
                    details=exc.to_dict(),
                )
                return failure(exc.message)
            header_count = len(headers)
            items = raw_items[1:]
        elif source_format != SourceFormat.JSON:
            raise ValueError(f"Unsupported source format: {source_format!r}")

        label = _ROW_LABELS[source_format]
        accepted: list[WaterLevelData] = []
        errors: list[str] = []
        level_total = 0.0
        unknown_statuses = 0

        for ordinal, raw_item in enumerate(items, start=1):
            running_average = level_total / len(accepted) if accepted else None
            try:
                if role_map is not None:
                    record, row_error = self._normalizer.normalize_csv_row(
                        line=str(raw_item),
                        header_count=header_count,
                        role_map=role_map,
                        ordinal=ordinal,
                        station=station,
                        running_average_level=running_average,
                    )
                else:
                    record, row_error = self._normalizer.normalize_json_item(
                        item=raw_item,
                        ordinal=ordinal,
                        station=station,
                        running_average_level=running_average,
                    )
            except Exception as exc:  # noqa: BLE001
                record, row_error = self._unexpected(exc)

            if row_error is not None or record is None:
                message = row_error.message if row_error is not None else "Unknown error"
                self._record_error(errors, f"{label} {ordinal}: {message}")
                continue

            accepted.append(record)
            level_total += record.level
            if record.status not in KNOWN_STATUSES:
                unknown_statuses += 1

        outcome = assemble(accepted, errors, empty_message=_EMPTY_MESSAGES[source_format])
        log_event(
            logger,
            logging.INFO,
            "upload_batch_completed",
            station_id=station.station_id,
            source_format=source_format,
            rows_accepted=outcome.data_point_count,
            rows_failed=len(errors),
            unknown_status_rows=unknown_statuses,
            success=outcome.success,
        )
        return outcome

    @staticmethod
    def _unexpected(exc: Exception) -> NormalizeResult:
        logger.exception("Unexpected error while normalizing upload row")
        return None, RowError(
            code=RowErrorCode.UNEXPECTED,
            message=str(exc) or exc.__class__.__name__,
        )

    def _record_error(self, errors: list[str], error: str) -> None:
        if self._log_row_errors:
            logger.warning("Upload validation error %s", error)
        errors.append(error)
