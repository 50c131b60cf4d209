# Catalog service - wires settings, remote store, index cache and worker pool.
# Created: 2026-10-19

from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, ThreadPoolExecutor

from vodcatalog.catalog import CatalogBuilder
from vodcatalog.config import Settings
from vodcatalog.index_cache import IndexCache
from vodcatalog.integrations.alist import AListClient
from vodcatalog.integrations.protocol import RemoteFileStore
from vodcatalog.models import CatalogPage, Category
from vodcatalog.search import SearchEngine
from vodcatalog.sorting import parse_sort_key

logger = logging.getLogger(__name__)


class CatalogService:
    """Facade used by the HTTP layer and the CLI.

    Owns the search worker pool unless one is passed in; use as a context
    manager or call ``close()`` when done.
    """

    def __init__(
        self,
        settings: Settings,
        store: RemoteFileStore | None = None,
        executor: Executor | None = None,
        index_cache: IndexCache | None = None,
    ):
        self.settings = settings
        self._owned_store = None
        if store is None:
            store = self._owned_store = AListClient(timeout=settings.request_timeout)
        self.store = store

        self._owns_executor = executor is None
        if executor is None:
            workers = settings.search_workers or os.cpu_count() or 4
            executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="search")
        self.executor = executor

        self.index_cache = index_cache or IndexCache(settings.cache_dir, timeout=settings.request_timeout * 4)
        self.catalog = CatalogBuilder(settings, store)
        self.search_engine = SearchEngine(settings, store, self.index_cache, executor)

    def __enter__(self) -> CatalogService:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)
        if self._owned_store is not None:
            self._owned_store.close()

    def warm_up(self) -> None:
        """Download every configured index file that is not cached yet."""
        self.index_cache.warm(self.settings.sites)

    def categories(self) -> list[Category]:
        return self.catalog.categories()

    def browse(self, tid: str, sort: str | None = None, page: int = 1) -> CatalogPage:
        return self.catalog.build_page(tid, parse_sort_key(sort), page)

    def detail(self, tid: str) -> CatalogPage:
        return self.catalog.get_detail(tid)

    def search(self, keyword: str) -> CatalogPage:
        return self.search_engine.search(keyword)

    def play_url(self, site: str, path: str) -> str:
        return self.catalog.get_play_url(site, path)
