"""
dwlr_ingest/api/routers package marker.
"""

from dwlr_ingest.api.routers.samples import router as samples_router
from dwlr_ingest.api.routers.uploads import router as uploads_router

__all__ = [
    "samples_router",
    "uploads_router",
]
