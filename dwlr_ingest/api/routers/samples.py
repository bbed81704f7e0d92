"""
dwlr_ingest/api/routers/samples.py

Sample upload file downloads.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response, status

from dwlr_ingest.services.sample_data import SAMPLE_FILENAMES, SAMPLE_MEDIA_TYPES, build_sample

router = APIRouter(tags=["samples"])


@router.get("/samples/{source_format}")
def download_sample(source_format: str) -> Response:
    """
    Download an example CSV or JSON upload file.
    """

    normalized = source_format.strip().lower()
    if normalized not in SAMPLE_FILENAMES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sample format must be 'csv' or 'json'.",
        )

    return Response(
        content=build_sample(normalized),
        media_type=SAMPLE_MEDIA_TYPES[normalized],
        headers={
            "Content-Disposition": f'attachment; filename="{SAMPLE_FILENAMES[normalized]}"',
        },
    )
