# Catalog router - categories, browse, detail, search and play redirect.
# Created: 2026-10-19

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from vodcatalog.api.v1.schemas.vod import CategoriesOut, CategoryOut, PageOut, SortOption
from vodcatalog.errors import (
    CatalogError,
    InvalidCatalogId,
    RemoteUnavailable,
    UnknownSite,
)
from vodcatalog.service import CatalogService
from vodcatalog.sorting import SORT_FILTERS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Catalog"])


def get_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def _http_error(exc: CatalogError) -> HTTPException:
    if isinstance(exc, (UnknownSite, InvalidCatalogId)):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, RemoteUnavailable):
        return HTTPException(status_code=502, detail=str(exc))
    logger.error("Catalog request failed: %s", exc)
    return HTTPException(status_code=500, detail=str(exc))


@router.get("/vod/categories", response_model=CategoriesOut)
def categories(service: CatalogService = Depends(get_service)):
    """List one browse root per configured site."""
    return CategoriesOut(
        categories=[CategoryOut.of(c) for c in service.categories()],
        sort_options=[SortOption(label=label, value=value) for label, value in SORT_FILTERS],
    )


@router.get("/vod/list", response_model=PageOut)
def browse(
    t: str = Query(..., description="Folder id, site$path"),
    sort: str | None = None,
    pg: int = Query(1, ge=1),
    service: CatalogService = Depends(get_service),
):
    """One page of a folder: folders, playlists, then files."""
    try:
        return PageOut.of(service.browse(t, sort, pg))
    except CatalogError as e:
        raise _http_error(e) from e


@router.get("/vod/detail", response_model=PageOut)
def detail(
    ids: str = Query(..., description="Entry id, site$path[#index]"),
    service: CatalogService = Depends(get_service),
):
    try:
        return PageOut.of(service.detail(ids))
    except CatalogError as e:
        raise _http_error(e) from e


@router.get("/vod/search", response_model=PageOut)
def search(wd: str = Query(..., min_length=1), service: CatalogService = Depends(get_service)):
    """Search every searchable site. Failing sites are skipped."""
    return PageOut.of(service.search(wd))


@router.get("/play")
def play(site: str, path: str, service: CatalogService = Depends(get_service)):
    """Redirect to the raw URL of a media file."""
    try:
        url = service.play_url(site, path)
    except CatalogError as e:
        raise _http_error(e) from e
    return RedirectResponse(url, status_code=307)
