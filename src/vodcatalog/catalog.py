# Catalog builder - turn remote folder listings into catalog pages and details.
# Created: 2026-10-19
#
# A browse page is laid out as: folders, then playlists (parsed from
# playlist.txt or one synthesised "all files" entry), then files.

from __future__ import annotations

import logging
from urllib.parse import urlencode

from vodcatalog.config import Settings, Site
from vodcatalog.errors import UnknownSite
from vodcatalog.integrations.protocol import RemoteFileStore
from vodcatalog.models import (
    FOLDER_PIC,
    FOLDER_REMARK,
    KIND_FILE,
    KIND_FOLDER,
    LIST_PIC,
    PLAY_URL_SEPARATOR,
    PLAYLIST,
    PLAYLIST_NAME,
    PLAYLIST_TXT,
    CatalogEntry,
    CatalogPage,
    Category,
    DirEntry,
    episode_remark,
    fix_http,
    fix_path,
    make_catalog_id,
    split_catalog_id,
)
from vodcatalog.naturalsort import natural_key
from vodcatalog.playlist import group_from_files, parse_ordinal, parse_playlist, read_group, strip_ordinal
from vodcatalog.sorting import SortKey

logger = logging.getLogger(__name__)

_UNITS = (
    (1024**4, "TB"),
    (1024**3, "GB"),
    (1024**2, "MB"),
)


def file_size(size: int) -> str:
    """Human-readable size in binary units; empty for zero bytes."""
    if size <= 0:
        return ""
    for threshold, unit in _UNITS:
        if size >= threshold:
            return f"{size / threshold:.2f}{unit}"
    return f"{size / 1024:.2f}KB"


def cover_for(thumb: str, is_dir: bool) -> str:
    if not thumb and is_dir:
        return FOLDER_PIC
    return thumb


def parent_path(path: str) -> str:
    index = path.rfind("/")
    if index > 0:
        return path[:index]
    return path


class CatalogBuilder:
    """Builds catalog pages, details and play URLs on top of a RemoteFileStore."""

    def __init__(self, settings: Settings, store: RemoteFileStore):
        self.settings = settings
        self.store = store

    def site(self, name: str) -> Site:
        site = self.settings.get_site(name)
        if site is None:
            raise UnknownSite(f"Unknown site: {name}")
        return site

    def categories(self) -> list[Category]:
        return [Category(type_id=f"{site.name}$/", type_name=site.name) for site in self.settings.sites]

    # -- browse ------------------------------------------------------------

    def build_page(self, tid: str, sort_key: SortKey, page: int = 1) -> CatalogPage:
        """Build one page of the folder identified by *tid* (``site$path``)."""
        site_name, path = split_catalog_id(tid)
        site = self.site(site_name)
        size = self.settings.page_size

        listing = self.store.list_directory(site, path, page, size)
        total = listing.total

        folders: list[CatalogEntry] = []
        files: list[CatalogEntry] = []
        playlists: list[CatalogEntry] = []

        for item in listing.entries:
            if not item.is_dir and item.name == PLAYLIST_TXT:
                playlists = self.playlist_summaries(site, fix_path(f"{path}/{PLAYLIST_TXT}"))
                total -= 1
                continue
            if not item.is_dir and not self.settings.is_media_format(item.name):
                total -= 1
                continue

            entry = self._entry(site, path, item)
            if item.is_dir:
                folders.append(entry)
            else:
                files.append(entry)

        sort_key.apply(folders)
        sort_key.apply(files)

        if page == 1 and len(files) > 1 and not playlists:
            playlists = [self.auto_playlist_summary(site, path, total - len(folders), files)]

        result = CatalogPage(
            entries=folders + playlists + files,
            page=page,
            total=total,
            page_size=size,
        )
        logger.debug("list %s page %d: %d entries, total %d", tid, page, len(result.entries), total)
        return result

    def _entry(self, site: Site, path: str, item: DirEntry) -> CatalogEntry:
        remarks = file_size(item.size)
        if item.is_dir:
            remarks += FOLDER_REMARK
        return CatalogEntry(
            id=make_catalog_id(site.name, f"{path}/{item.name}"),
            name=item.name,
            kind=KIND_FOLDER if item.is_dir else KIND_FILE,
            pic=cover_for(item.thumb, item.is_dir),
            remarks=remarks,
            time=item.modified,
            size=item.size,
        )

    def playlist_summaries(self, site: Site, path: str) -> list[CatalogEntry]:
        """One summary entry per group of the playlist.txt at *path*."""
        content = self.store.read_file_content(site, path)
        if content is None:
            return []
        return [
            CatalogEntry(
                id=make_catalog_id(site.name, path, index),
                name=group.name or PLAYLIST_NAME,
                kind=KIND_FILE,
                pic=group.cover,
                remarks=group.remark,
            )
            for index, group in enumerate(parse_playlist(content))
        ]

    def auto_playlist_summary(
        self, site: Site, path: str, remaining: int, files: list[CatalogEntry]
    ) -> CatalogEntry:
        """The synthesised "all files in this folder" entry.

        The episode count is only shown when *remaining* (total minus
        folders) fits in one page, i.e. *files* is the complete set.
        """
        entry = CatalogEntry(
            id=make_catalog_id(site.name, path + PLAYLIST),
            name=PLAYLIST_NAME,
            kind=KIND_FILE,
            pic=LIST_PIC,
        )
        if remaining < self.settings.page_size:
            entry.remarks = episode_remark(len(files))
        return entry

    # -- detail ------------------------------------------------------------

    def get_detail(self, tid: str) -> CatalogPage:
        site_name, path = split_catalog_id(tid)
        site = self.site(site_name)
        if PLAYLIST in path or PLAYLIST_TXT in path:
            return self.get_playlist(site, path)

        detail = self.store.get_file(site, path)
        entry = CatalogEntry(
            id=tid,
            name=detail.name,
            kind=KIND_FOLDER if detail.is_dir else KIND_FILE,
            pic=cover_for(detail.thumb, detail.is_dir),
            time=detail.modified,
            size=detail.size,
            play_from=detail.provider,
            play_url=f"{detail.name}${fix_http(detail.raw_url)}",
            content=tid,
        )
        result = CatalogPage.single([entry])
        logger.debug("detail: %s", result)
        return result

    def get_playlist(self, site: Site, path: str) -> CatalogPage:
        logger.info("load playlist: %s %s", site.name, path)
        if PLAYLIST not in path:
            return self.read_playlist_file(site, path)

        folder = parent_path(path)
        detail = self.store.get_file(site, folder)
        listing = self.store.list_directory(site, folder, 1, 0)
        names = [e.name for e in listing.entries if not e.is_dir and self.settings.is_media_format(e.name)]
        if self.settings.sort_enabled(site):
            names.sort(key=natural_key)

        group = group_from_files(names)
        entry = CatalogEntry(
            id=make_catalog_id(site.name, path),
            name=detail.name,
            kind=KIND_FILE,
            pic=LIST_PIC,
            time=detail.modified,
            play_from=detail.provider,
            content=make_catalog_id(site.name, folder),
            play_url=self._play_urls(site, folder, group.episodes),
        )
        result = CatalogPage.single([entry])
        logger.debug("playlist: %s", result)
        return result

    def read_playlist_file(self, site: Site, path: str) -> CatalogPage:
        index = parse_ordinal(path)
        if index is None:
            index = 0
        file_path = strip_ordinal(path)
        folder = parent_path(file_path)

        detail = self.store.get_file(site, folder)
        content = self.store.read_file_content(site, file_path) or ""
        group, metadata = read_group(content, index)

        entry = CatalogEntry(
            id=make_catalog_id(site.name, path),
            name=metadata.name or detail.name,
            kind=KIND_FILE,
            pic=LIST_PIC,
            time=detail.modified,
            play_from=detail.provider,
            type_name=metadata.type,
            actor=metadata.actor,
            director=metadata.director,
            content=metadata.content,
            lang=metadata.lang,
            area=metadata.area,
            year=metadata.year,
        )
        if group is not None:
            if group.name:
                entry.name = f"{entry.name} {group.name}"
            entry.pic = group.cover
            entry.play_url = self._play_urls(site, folder, group.episodes)

        result = CatalogPage.single([entry])
        logger.debug("playlist: %s", result)
        return result

    def _play_urls(self, site: Site, folder: str, episodes: list[tuple[str, str]]) -> str:
        return PLAY_URL_SEPARATOR.join(
            f"{label}${self.build_play_url(site.name, fix_path(f'{folder}/{target}'))}"
            for label, target in episodes
        )

    def build_play_url(self, site: str, path: str) -> str:
        base = self.settings.public_base_url.rstrip("/")
        return f"{base}/api/v1/play?{urlencode({'site': site, 'path': path})}"

    # -- play ----------------------------------------------------------------

    def get_play_url(self, site: str, path: str) -> str:
        detail = self.store.get_file(self.site(site), path)
        return fix_http(detail.raw_url)
