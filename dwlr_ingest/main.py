from __future__ import annotations

import logging

from fastapi import FastAPI

from dwlr_ingest import __version__
from dwlr_ingest.config import get_ingestion_settings, get_logging_settings
from dwlr_ingest.services.dataset_store import StationDatasetStore
from dwlr_ingest.services.upload_service import build_upload_service


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = get_logging_settings().level
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(*, store: StationDatasetStore | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The dataset store is owned by the application instance; pass one in to
    share or inspect it (tests do).
    """

    _configure_logging()

    application = FastAPI(
        title="DWLR Upload Ingestion API",
        version=__version__,
    )

    dataset_store = store if store is not None else StationDatasetStore()
    application.state.dataset_store = dataset_store
    application.state.upload_service = build_upload_service(
        store=dataset_store,
        settings=get_ingestion_settings(),
    )

    from dwlr_ingest.api.routers import samples_router, uploads_router

    application.include_router(uploads_router)
    application.include_router(samples_router)

    @application.get("/health")
    def healthcheck() -> dict[str, object]:
        return {
            "status": "ok",
            "stations_loaded": len(dataset_store),
        }

    logging.getLogger(__name__).info("Upload ingestion API initialized")
    return application


app = create_app()
