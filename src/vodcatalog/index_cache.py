# Index cache - download a site's search index once and keep it forever.
# Created: 2026-10-19
#
# Cache layout: <cache_dir>/<site>/<basename(url)>. A ".zip" download is
# extracted into a staging directory and only the ".txt" it contains is kept.
# An existing cache file is never revalidated.

from __future__ import annotations

import logging
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Iterable

import httpx

from vodcatalog.config import Site
from vodcatalog.errors import CorruptArchive, IndexUnavailable

logger = logging.getLogger(__name__)

DEFAULT_INDEX_NAME = "index.txt"


def is_remote(location: str) -> bool:
    return location.startswith("http://") or location.startswith("https://")


def index_file_name(url: str) -> str:
    """Last path segment of *url*, or ``index.txt`` when there is none."""
    name = url.rsplit("/", 1)[-1] if "/" in url else DEFAULT_INDEX_NAME
    return name or DEFAULT_INDEX_NAME


def safe_extract(archive: Path, dest: Path) -> list[Path]:
    """Extract *archive* into *dest*, skipping entries that would land outside it.

    Returns the extracted file paths.
    """
    root = dest.resolve()
    extracted: list[Path] = []
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            target = (root / info.filename).resolve()
            if target != root and root not in target.parents:
                logger.warning("Skipping archive entry outside %s: %s", root, info.filename)
                continue
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(target, "wb") as out:
                while chunk := src.read(1 << 16):
                    out.write(chunk)
            extracted.append(target)
    return extracted


class IndexCache:
    """Resolves a site's index location to a readable local text file."""

    def __init__(self, cache_dir: Path, client: httpx.Client | None = None, timeout: float = 60.0):
        self.cache_dir = Path(cache_dir)
        self._client = client
        self._timeout = timeout

    def cache_path(self, site: str, url: str) -> Path:
        name = index_file_name(url)
        if name.endswith(".zip"):
            name = name[: -len(".zip")] + ".txt"
        return self.cache_dir / site / name

    def resolve(self, site: str, location: str) -> Path:
        """Return a local path for *location*, downloading it on first use.

        Raises:
            IndexUnavailable: download or filesystem failure.
            CorruptArchive: bad zip, or the expected .txt is not inside it.
        """
        if not is_remote(location):
            return Path(location)

        target = self.cache_path(site, location)
        if target.exists():
            return target.absolute()

        logger.info("Downloading index file for %s from %s", site, location)
        name = index_file_name(location)
        if name.endswith(".zip"):
            archive = target.parent / name
            self._download(location, archive)
            try:
                self._extract(archive, target)
            finally:
                archive.unlink(missing_ok=True)
        else:
            self._download(location, target)

        return target.absolute()

    def warm(self, sites: Iterable[Site]) -> None:
        """Resolve every searchable site's index once; failures are only logged."""
        for site in sites:
            if not (site.searchable and site.has_index_file):
                continue
            try:
                self.resolve(site.name, site.index_file)
            except (IndexUnavailable, CorruptArchive) as exc:
                logger.warning("Index for %s unavailable: %s", site.name, exc)

    def _extract(self, archive: Path, target: Path) -> None:
        """Extract *archive* into a staging directory and move *target* into place.

        *target* only appears once the whole archive has been read without error.
        """
        try:
            staging = Path(tempfile.mkdtemp(prefix=".extract-", dir=target.parent))
        except OSError as exc:
            raise IndexUnavailable(f"Cannot extract {archive}: {exc}") from exc
        try:
            safe_extract(archive, staging)
            extracted = staging / target.name
            if not extracted.is_file():
                raise CorruptArchive(f"{target.name} not found in {archive.name}")
            extracted.replace(target)
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise CorruptArchive(f"Cannot extract {archive}: {exc}") from exc
        except OSError as exc:
            raise IndexUnavailable(f"Cannot extract {archive}: {exc}") from exc
        finally:
            shutil.rmtree(staging, ignore_errors=True)

    def _download(self, url: str, dest: Path) -> None:
        partial = dest.with_name(dest.name + ".part")
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            client = self._client or httpx.Client(timeout=self._timeout, follow_redirects=True)
            try:
                with client.stream("GET", url) as resp:
                    resp.raise_for_status()
                    with open(partial, "wb") as out:
                        for chunk in resp.iter_bytes():
                            out.write(chunk)
            finally:
                if self._client is None:
                    client.close()
            partial.replace(dest)
        except (httpx.HTTPError, OSError) as exc:
            partial.unlink(missing_ok=True)
            raise IndexUnavailable(f"Cannot download {url}: {exc}") from exc
        logger.debug("Saved %s to %s", url, dest)
