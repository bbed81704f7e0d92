"""
dwlr_ingest/services/result_assembler.py

Packages accepted records and row errors into a ParseOutcome.
"""

from __future__ import annotations

from typing import Sequence

from dwlr_ingest.domain.water_level import ParseOutcome, WaterLevelData

DEFAULT_EMPTY_MESSAGE = "No valid data points could be parsed from the file"


def assemble(
    accepted: Sequence[WaterLevelData],
    errors: Sequence[str],
    *,
    empty_message: str = DEFAULT_EMPTY_MESSAGE,
) -> ParseOutcome:
    """
    Build the final outcome for one batch.

    Records are stably sorted by timestamp. Errors are passed through
    untruncated and only attached when there is at least one.
    """

    error_list = list(errors) or None
    if not accepted:
        return ParseOutcome(success=False, message=empty_message, errors=error_list)

    data_points = sorted(accepted, key=lambda record: record.timestamp)
    return ParseOutcome(
        success=True,
        message=f"Successfully parsed {len(data_points)} data points",
        data_points=data_points,
        errors=error_list,
    )


def failure(message: str) -> ParseOutcome:
    """
    Outcome for a batch that stopped before any row was processed.
    """

    return ParseOutcome(success=False, message=message)
