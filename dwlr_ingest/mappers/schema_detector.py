"""
dwlr_ingest/mappers/schema_detector.py

Maps loosely-named source fields onto canonical reading roles.

One resolution function serves both input shapes: CSV resolves once per file
against the header row (substring matching, header order wins), JSON resolves
once per item against that item's keys (exact matching, alias order wins).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Sequence

from dwlr_ingest.validators.role_validator import RoleMapValidator

ROLE_TIMESTAMP = "timestamp"
ROLE_LEVEL = "level"
ROLE_TEMPERATURE = "temperature"
ROLE_PH = "ph"
ROLE_STATUS = "status"
ROLE_LOCATION = "location"
ROLE_COORDINATES = "coordinates"

ROLE_ALIASES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (ROLE_TIMESTAMP, ("timestamp", "date", "datetime", "time")),
    (ROLE_LEVEL, ("level", "water_level", "waterlevel", "height", "depth")),
    (ROLE_TEMPERATURE, ("temperature", "temp", "water_temp")),
    (ROLE_PH, ("ph", "ph_level", "acidity")),
    (ROLE_STATUS, ("status",)),
    (ROLE_LOCATION, ("location",)),
    (ROLE_COORDINATES, ("coordinates",)),
)

REQUIRED_ROLES: tuple[str, ...] = (ROLE_TIMESTAMP, ROLE_LEVEL)

CSV_MISSING_ROLE_MESSAGES: dict[str, str] = {
    ROLE_TIMESTAMP: "CSV must contain a timestamp column (timestamp, date, datetime, or time)",
    ROLE_LEVEL: "CSV must contain a water level column (level, water_level, height, or depth)",
}

FieldId = int | str


def normalize_key(key: str) -> str:
    """
    Normalize a header or key for case-insensitive matching.
    """

    return key.strip().lower()


@dataclass(frozen=True)
class FieldRoleMap:
    """
    Resolved role-to-source mapping.

    Values are column indexes for CSV headers and original key names for
    JSON objects; ``None`` marks an unresolved role.
    """

    timestamp: FieldId | None = None
    level: FieldId | None = None
    temperature: FieldId | None = None
    ph: FieldId | None = None
    status: FieldId | None = None
    location: FieldId | None = None
    coordinates: FieldId | None = None

    def get(self, role: str) -> FieldId | None:
        return getattr(self, role, None)

    def resolved_roles(self) -> dict[str, FieldId]:
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


def resolve_roles(keys: Sequence[str], *, exact: bool = False) -> FieldRoleMap:
    """
    Resolve every canonical role against ``keys``.

    With ``exact=False`` a role takes the index of the first key (in the given
    order) that contains any of its aliases. With ``exact=True`` aliases are
    probed in alias order and a role takes the first key equal to one of them.
    """

    normalized = [normalize_key(str(key)) for key in keys]
    resolved: dict[str, FieldId] = {}

    for role, aliases in ROLE_ALIASES:
        if exact:
            match = _first_exact_key(keys, normalized, aliases)
        else:
            match = _first_containing_index(normalized, aliases)
        if match is not None:
            resolved[role] = match

    return FieldRoleMap(**resolved)


def _first_containing_index(normalized: Sequence[str], aliases: Sequence[str]) -> int | None:
    for index, key in enumerate(normalized):
        if any(alias in key for alias in aliases):
            return index
    return None


def _first_exact_key(
    keys: Sequence[str],
    normalized: Sequence[str],
    aliases: Sequence[str],
) -> str | None:
    for alias in aliases:
        for key, key_norm in zip(keys, normalized):
            if key_norm == alias:
                return key
    return None


class SchemaDetector:
    """
    Resolves CSV header rows into field-role maps.
    """

    def __init__(self, *, validator: RoleMapValidator | None = None) -> None:
        self._validator = validator or RoleMapValidator(
            required_roles=REQUIRED_ROLES,
            missing_messages=CSV_MISSING_ROLE_MESSAGES,
        )

    def detect(self, headers: Sequence[str]) -> FieldRoleMap:
        """
        Resolve roles for a CSV header row.

        Raises SchemaDetectionError when ``timestamp`` or ``level`` is missing.
        """

        normalized_headers = [normalize_key(header) for header in headers]
        role_map = resolve_roles(normalized_headers)
        self._validator.validate(role_map=role_map, source_headers=normalized_headers)
        return role_map

    @staticmethod
    def detect_item(item_keys: Sequence[str]) -> FieldRoleMap:
        """
        Resolve roles for one JSON object; never raises.
        """

        return resolve_roles(item_keys, exact=True)
