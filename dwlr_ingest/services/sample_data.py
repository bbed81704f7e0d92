"""
dwlr_ingest/services/sample_data.py

Downloadable example upload files.
"""

from __future__ import annotations

import json

from dwlr_ingest.domain.water_level import SourceFormat

SAMPLE_CSV = """timestamp,level,temperature,ph
2024-01-15 08:00:00,205.5,22.3,7.2
2024-01-15 08:01:00,205.7,22.4,7.1
2024-01-15 08:02:00,205.6,22.5,7.3
2024-01-15 08:03:00,205.8,22.3,7.2"""

SAMPLE_JSON_ITEMS: tuple[dict[str, object], ...] = (
    {
        "timestamp": "2024-01-15T08:00:00Z",
        "level": 205.5,
        "temperature": 22.3,
        "ph": 7.2,
        "status": "normal",
    },
    {
        "timestamp": "2024-01-15T08:01:00Z",
        "level": 205.7,
        "temperature": 22.4,
        "ph": 7.1,
        "status": "normal",
    },
)

SAMPLE_FILENAMES: dict[str, str] = {
    SourceFormat.CSV: "sample_water_level_data.csv",
    SourceFormat.JSON: "sample_water_level_data.json",
}

SAMPLE_MEDIA_TYPES: dict[str, str] = {
    SourceFormat.CSV: "text/csv",
    SourceFormat.JSON: "application/json",
}


def build_sample(source_format: str) -> str:
    """
    Return the sample file content for ``csv`` or ``json``.
    """

    if source_format == SourceFormat.CSV:
        return SAMPLE_CSV
    if source_format == SourceFormat.JSON:
        return json.dumps(list(SAMPLE_JSON_ITEMS), indent=2)
    raise ValueError(f"Unsupported sample format: {source_format!r}")
