from __future__ import annotations

from datetime import datetime, timezone

import pytest

from dwlr_ingest.domain.water_level import ParseOutcome, WaterLevelData
from dwlr_ingest.services.result_assembler import assemble, failure


def _record(record_id: str, day: int, level: float = 1.0) -> WaterLevelData:
    return WaterLevelData(
        id=record_id,
        timestamp=datetime(2024, 1, day, tzinfo=timezone.utc),
        level=level,
        location="Test Well",
        coordinates=(12.97, 77.59),
        status="normal",
    )


def test_sorts_records_and_builds_message() -> None:
    outcome = assemble([_record("c", 3), _record("a", 1), _record("b", 2)], [])

    assert outcome.success is True
    assert outcome.message == "Successfully parsed 3 data points"
    assert [record.id for record in outcome.data_points] == ["a", "b", "c"]
    assert outcome.errors is None


def test_sort_is_stable_for_equal_timestamps() -> None:
    outcome = assemble([_record("first", 5), _record("second", 5), _record("early", 4)], [])

    assert [record.id for record in outcome.data_points] == ["early", "first", "second"]


def test_partial_success_keeps_all_errors() -> None:
    errors = [f"Row {index}: Column count mismatch" for index in range(1, 40)]

    outcome = assemble([_record("a", 1)], errors)

    assert outcome.success is True
    assert outcome.errors == errors


def test_no_records_is_failure_even_without_errors() -> None:
    outcome = assemble([], [])

    assert outcome.success is False
    assert outcome.message == "No valid data points could be parsed from the file"
    assert outcome.data_points is None
    assert outcome.errors is None


def test_custom_empty_message_and_errors() -> None:
    outcome = assemble([], ["Item 1: Invalid timestamp"], empty_message="nothing parsed")

    assert outcome.message == "nothing parsed"
    assert outcome.errors == ["Item 1: Invalid timestamp"]


def test_failure_outcome_has_no_payload() -> None:
    outcome = failure("JSON data must be an array of objects")

    assert outcome == ParseOutcome(success=False, message="JSON data must be an array of objects")
    assert outcome.data_point_count == 0
    assert outcome.error_count == 0


def test_outcome_is_frozen() -> None:
    outcome = failure("x")
    with pytest.raises((AttributeError, TypeError)):
        outcome.success = True  # type: ignore[misc]
