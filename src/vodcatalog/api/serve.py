"""HTTP server for ``vodcatalog serve``.

Builds the FastAPI app with the versioned ``/api/v1/`` routers. The
CatalogService (and its search worker pool) lives for the lifetime of the
app and is closed on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from vodcatalog.config import Settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, service=None):
    """Build the FastAPI application.

    *service* replaces the CatalogService built from *settings* (tests).
    """
    from fastapi import FastAPI

    from vodcatalog import __version__
    from vodcatalog.api.v1 import mount_v1_routers
    from vodcatalog.service import CatalogService

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = service is None
        app.state.catalog_service = service or CatalogService(settings or Settings.load())
        if owned:
            await asyncio.to_thread(app.state.catalog_service.warm_up)
        try:
            yield
        finally:
            if owned:
                app.state.catalog_service.close()

    app = FastAPI(
        title="vodcatalog",
        description="AList folders as a paginated video catalog.",
        version=__version__,
        docs_url="/api/v1/docs",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )
    mount_v1_routers(app)
    return app


def run_api_server(settings: Settings, host: str = "127.0.0.1", port: int = 5678) -> None:
    """Start the API server with uvicorn."""
    import uvicorn

    logger.info("Serving %d site(s) on http://%s:%d", len(settings.sites), host, port)
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
