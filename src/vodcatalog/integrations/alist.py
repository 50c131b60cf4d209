# AList client - HTTP client for the AList v3 file listing API.
# Created: 2026-10-19

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

import httpx

from vodcatalog.config import Site
from vodcatalog.errors import RemoteUnavailable
from vodcatalog.models import DirEntry, DirListing, FileDetail, fix_http

logger = logging.getLogger(__name__)

_LIST_API = "/api/fs/list"
_GET_API = "/api/fs/get"
_SEARCH_PAGE_SIZE = 1000
# AList reports a missing path as code 500 with this message
_OBJECT_NOT_FOUND = "object not found"


def _entry(item: dict[str, Any], parent: str = "") -> DirEntry:
    return DirEntry(
        name=item.get("name", ""),
        is_dir=bool(item.get("is_dir", False)),
        size=int(item.get("size") or 0),
        modified=item.get("modified") or "",
        parent=item.get("parent") or parent,
        thumb=item.get("thumb") or "",
        provider=item.get("provider"),
    )


def _is_missing(exc: RemoteUnavailable) -> bool:
    """True when the store answered that the object does not exist."""
    if exc.code == 404:
        return True
    return exc.code is not None and _OBJECT_NOT_FOUND in exc.remote_message.lower()


class AListClient:
    """HTTP client for AList's ``/api/fs/*`` endpoints.

    A single ``httpx.Client`` is shared by all sites; pass one in to control
    transport and timeouts (tests use ``httpx.MockTransport``).
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float = 15.0):
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _post(self, site: Site, api: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = site.url.rstrip("/") + api
        try:
            resp = self._client.post(url, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            raise RemoteUnavailable(
                f"{site.name}: {api} returned HTTP {e.response.status_code}",
                status=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteUnavailable(f"{site.name}: {api} failed: {e}") from e

        code = body.get("code")
        if code != 200:
            message = body.get("message") or ""
            raise RemoteUnavailable(
                f"{site.name}: {api} error {code}: {message}",
                code=code,
                remote_message=message,
            )
        return body.get("data") or {}

    def list_directory(self, site: Site, path: str, page: int, page_size: int) -> DirListing:
        data = self._post(
            site,
            _LIST_API,
            {"path": path, "page": page, "per_page": page_size, "refresh": False},
        )
        provider = data.get("provider")
        entries = []
        for item in data.get("content") or []:
            entry = _entry(item, parent=path)
            if entry.provider is None and provider:
                entry = replace(entry, provider=provider)
            entries.append(entry)
        total = int(data.get("total") or len(entries))
        logger.debug("list %s:%s page %d -> %d/%d", site.name, path, page, len(entries), total)
        return DirListing(entries=entries, total=total)

    def get_file(self, site: Site, path: str) -> FileDetail:
        data = self._post(site, _GET_API, {"path": path})
        return FileDetail(
            name=data.get("name", ""),
            is_dir=bool(data.get("is_dir", False)),
            size=int(data.get("size") or 0),
            modified=data.get("modified") or "",
            thumb=data.get("thumb") or "",
            provider=data.get("provider"),
            raw_url=data.get("raw_url") or "",
        )

    def search(self, site: Site, endpoint: str, keyword: str) -> list[DirEntry]:
        data = self._post(
            site,
            endpoint,
            {"parent": "/", "keywords": keyword, "page": 1, "per_page": _SEARCH_PAGE_SIZE},
        )
        return [_entry(item) for item in data.get("content") or []]

    def read_file_content(self, site: Site, path: str) -> str | None:
        try:
            detail = self.get_file(site, path)
        except RemoteUnavailable as e:
            if not _is_missing(e):
                raise
            logger.debug("No content for %s:%s: %s", site.name, path, e)
            return None
        if not detail.raw_url:
            return None

        url = fix_http(detail.raw_url)
        try:
            resp = self._client.get(url)
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise RemoteUnavailable(f"{site.name}: cannot read {path}: {e}") from e
        return resp.text
