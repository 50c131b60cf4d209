# API v1 router aggregation.
# Created: 2026-10-19

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def mount_v1_routers(app: FastAPI) -> None:
    """Mount the v1 routers on *app* at ``/api/v1``."""
    from vodcatalog.api.v1.vod import router

    app.include_router(router, prefix="/api/v1")
    logger.debug("Mounted v1 router: vodcatalog.api.v1.vod")
