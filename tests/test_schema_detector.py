from __future__ import annotations

import unittest

from dwlr_ingest.mappers.schema_detector import FieldRoleMap, SchemaDetector, resolve_roles
from dwlr_ingest.validators.role_validator import SchemaDetectionError


class TestSchemaDetector(unittest.TestCase):
    def setUp(self) -> None:
        self.detector = SchemaDetector()

    def test_detects_canonical_headers(self) -> None:
        role_map = self.detector.detect(["timestamp", "level", "temperature", "ph"])

        self.assertEqual(role_map.timestamp, 0)
        self.assertEqual(role_map.level, 1)
        self.assertEqual(role_map.temperature, 2)
        self.assertEqual(role_map.ph, 3)
        self.assertIsNone(role_map.status)
        self.assertIsNone(role_map.location)
        self.assertIsNone(role_map.coordinates)

    def test_matches_aliases_by_substring_and_case(self) -> None:
        role_map = self.detector.detect([" Date ", "Water Level (m)", "Temp C", "Acidity"])

        self.assertEqual(role_map.timestamp, 0)
        self.assertEqual(role_map.level, 1)
        self.assertEqual(role_map.temperature, 2)
        self.assertEqual(role_map.ph, 3)

    def test_first_matching_header_wins(self) -> None:
        role_map = self.detector.detect(["time", "timestamp", "depth_m", "level"])

        self.assertEqual(role_map.timestamp, 0)
        self.assertEqual(role_map.level, 2)

    def test_detects_optional_status_location_coordinates(self) -> None:
        role_map = self.detector.detect(
            ["datetime", "height", "station_status", "location", "coordinates"]
        )

        self.assertEqual(role_map.status, 2)
        self.assertEqual(role_map.location, 3)
        self.assertEqual(role_map.coordinates, 4)

    def test_missing_level_raises_structured_error(self) -> None:
        with self.assertRaises(SchemaDetectionError) as ctx:
            self.detector.detect(["timestamp", "temperature"])

        self.assertEqual(
            ctx.exception.message,
            "CSV must contain a water level column (level, water_level, height, or depth)",
        )
        roles = [error.role for error in ctx.exception.errors]
        self.assertEqual(roles, ["level"])
        self.assertEqual(ctx.exception.errors[0].code, "required_role_unresolved")

    def test_missing_timestamp_is_reported_first(self) -> None:
        with self.assertRaises(SchemaDetectionError) as ctx:
            self.detector.detect(["reading", "value"])

        self.assertTrue(ctx.exception.message.startswith("CSV must contain a timestamp column"))
        roles = [error.role for error in ctx.exception.errors]
        self.assertEqual(roles, ["timestamp", "level"])


class TestResolveRoles(unittest.TestCase):
    def test_exact_mode_uses_alias_order_and_original_key(self) -> None:
        role_map = resolve_roles(["Water_Level", "Level", "TIME"], exact=True)

        self.assertEqual(role_map.level, "Level")
        self.assertEqual(role_map.timestamp, "TIME")

    def test_exact_mode_ignores_partial_matches(self) -> None:
        role_map = resolve_roles(["reading_level", "date_recorded"], exact=True)

        self.assertIsNone(role_map.level)
        self.assertIsNone(role_map.timestamp)

    def test_resolved_roles_omits_absent_roles(self) -> None:
        role_map = FieldRoleMap(timestamp=0, level=2)

        self.assertEqual(role_map.resolved_roles(), {"timestamp": 0, "level": 2})
        self.assertIsNone(role_map.get("ph"))

    def test_detect_item_never_raises(self) -> None:
        role_map = SchemaDetector.detect_item(["foo"])

        self.assertEqual(role_map.resolved_roles(), {})


if __name__ == "__main__":
    unittest.main()
