# Search engine - keyword search fanned out over every searchable site.
# Created: 2026-10-19
#
# Each site runs as one task on the injected executor: sites with an index
# file grep the cached index, the others call the remote search API. Results
# are concatenated in site order; a failing site contributes nothing.

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future

from vodcatalog.config import Settings, Site
from vodcatalog.errors import IndexUnavailable
from vodcatalog.index_cache import IndexCache
from vodcatalog.integrations.protocol import RemoteFileStore
from vodcatalog.models import (
    KIND_FILE,
    KIND_FOLDER,
    PLAYLIST,
    CatalogEntry,
    CatalogPage,
    make_catalog_id,
)

logger = logging.getLogger(__name__)


def keyword_tokens(keyword: str) -> set[str]:
    return set(keyword.split())


def matches(text: str, tokens: set[str]) -> bool:
    """Case-sensitive: *text* must contain every token."""
    return all(token in text for token in tokens)


class SearchEngine:
    """Concurrent multi-site keyword search."""

    def __init__(
        self,
        settings: Settings,
        store: RemoteFileStore,
        index_cache: IndexCache,
        executor: Executor,
    ):
        self.settings = settings
        self.store = store
        self.index_cache = index_cache
        self.executor = executor

    def search(self, keyword: str) -> CatalogPage:
        tasks: list[tuple[Site, Future]] = []
        for site in self.settings.sites:
            if not site.searchable:
                continue
            if site.has_index_file:
                future = self.executor.submit(self.search_by_file, site, keyword)
            else:
                future = self.executor.submit(self.search_by_api, site, keyword)
            tasks.append((site, future))

        results: list[CatalogEntry] = []
        for site, future in tasks:
            try:
                results.extend(future.result())
            except Exception:
                logger.warning("Search on %s failed", site.name, exc_info=True)

        logger.info('search "%s" result: %d', keyword, len(results))
        return CatalogPage.single(results)

    def search_by_file(self, site: Site, keyword: str) -> list[CatalogEntry]:
        index_file = self.index_cache.resolve(site.name, site.index_file)
        logger.info('search "%s" from site %s, index: %s', keyword, site.name, index_file)

        tokens = keyword_tokens(keyword)
        results = []
        try:
            with open(index_file, encoding="utf-8", errors="replace") as f:
                for line in f:
                    line = line.rstrip("\r\n")
                    if line and matches(line, tokens):
                        results.append(self._entry(site, "/" + line, line))
        except OSError as exc:
            raise IndexUnavailable(f"Cannot read index {index_file}: {exc}") from exc

        logger.debug('search "%s" from site %s, result: %d', keyword, site.name, len(results))
        return results

    def search_by_api(self, site: Site, keyword: str) -> list[CatalogEntry]:
        logger.info('search "%s" from site %s, api: %s', keyword, site.name, site.search_api)
        return [
            self._entry(site, f"{item.parent}/{item.name}", item.name)
            for item in self.store.search(site, site.search_api, keyword)
        ]

    def _entry(self, site: Site, path: str, name: str) -> CatalogEntry:
        is_media = self.settings.is_media_file(path)
        if not is_media:
            path += PLAYLIST
        return CatalogEntry(
            id=make_catalog_id(site.name, path),
            name=name,
            kind=KIND_FILE if is_media else KIND_FOLDER,
        )
