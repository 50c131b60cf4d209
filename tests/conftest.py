# Shared fixtures for vodcatalog tests.
# Created: 2026-10-19

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from vodcatalog.config import Settings, Site
from vodcatalog.errors import RemoteUnavailable
from vodcatalog.models import DirEntry, DirListing, FileDetail


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from ~/.vodcatalog and any VODCATALOG_* env vars."""
    import os

    for key in list(os.environ):
        if key.startswith("VODCATALOG_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("VODCATALOG_CONFIG_DIR", str(tmp_path / "config"))


class FakeStore:
    """In-memory RemoteFileStore.

    ``folders`` maps a path to its entries; ``files`` maps a path to a
    FileDetail; ``contents`` maps a path to text; ``results`` maps a site
    name to search results or an exception to raise.
    """

    def __init__(self):
        self.folders: dict[str, list[DirEntry]] = {}
        self.totals: dict[str, int] = {}
        self.files: dict[str, FileDetail] = {}
        self.contents: dict[str, str] = {}
        self.results: dict[str, list[DirEntry] | Exception] = {}
        self.calls: list[tuple] = []

    def list_directory(self, site, path, page, page_size):
        self.calls.append(("list", site.name, path, page, page_size))
        if path not in self.folders:
            raise RemoteUnavailable(f"object not found: {path}")
        entries = self.folders[path]
        return DirListing(entries=list(entries), total=self.totals.get(path, len(entries)))

    def get_file(self, site, path):
        self.calls.append(("get", site.name, path))
        if path not in self.files:
            raise RemoteUnavailable(f"object not found: {path}")
        return self.files[path]

    def search(self, site, endpoint, keyword):
        self.calls.append(("search", site.name, endpoint, keyword))
        result = self.results.get(site.name, [])
        if isinstance(result, Exception):
            raise result
        return result

    def read_file_content(self, site, path):
        self.calls.append(("read", site.name, path))
        return self.contents.get(path)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        sites=[Site(name="movies", url="http://alist.local")],
        page_size=10,
        formats={"mp4", "mkv"},
        cache_dir=tmp_path / "cache",
        public_base_url="http://tv.local",
    )


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True)
