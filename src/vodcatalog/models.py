"""Catalog data models.

Created: 2026-10-19

These models define the core data structures for:
- Remote listing entries (DirEntry, FileDetail) as returned by the file store
- Catalog entries and pages handed to the video-browsing client
- Playlist groups parsed from playlist.txt or synthesised from a listing

Design notes:
- Uses dataclasses, like the rest of the package
- Remote entries are read-only copies; nothing here talks to the network
- Identifiers are ``site$path`` with an optional ``#index`` suffix
"""

import math
import re
from dataclasses import dataclass, field

from vodcatalog.errors import InvalidCatalogId

# ============================================================================
# Constants
# ============================================================================

FOLDER_PIC = "http://img1.3png.com/281e284a670865a71d91515866552b5f172b.png"
LIST_PIC = "http://img1.3png.com/3063ad894f04619af7270df68a124f129c8f.png"

PLAYLIST = "/~playlist"  # auto generated playlist
PLAYLIST_TXT = "playlist.txt"  # user provided playlist
PLAYLIST_NAME = "播放列表"
FOLDER_REMARK = "文件夹"

KIND_FILE = "file"
KIND_FOLDER = "folder"

PLAY_URL_SEPARATOR = "#"

_SLASHES = re.compile(r"/+")


def episode_remark(count: int) -> str:
    """Remark shown on a playlist summary: the number of episodes."""
    return f"共{count}集"


def fix_path(path: str) -> str:
    """Collapse runs of ``/`` into one."""
    return _SLASHES.sub("/", path)


def fix_http(url: str) -> str:
    """Rewrite a protocol-relative URL (``//host/x``) to ``http://host/x``."""
    if url.startswith("//"):
        return "http:" + url
    return url


def make_catalog_id(site: str, path: str, index: int | None = None) -> str:
    tid = f"{site}${fix_path(path)}"
    if index is not None:
        tid += f"#{index}"
    return tid


def split_catalog_id(tid: str) -> tuple[str, str]:
    """Split ``site$path`` at the first ``$``.

    The ``#index`` suffix, if any, stays on the path; see
    ``vodcatalog.playlist.parse_ordinal``.
    """
    site, sep, path = tid.partition("$")
    if not sep or not site:
        raise InvalidCatalogId(f"Invalid catalog id: {tid!r}")
    return site, path or "/"


# ============================================================================
# Remote entries
# ============================================================================


@dataclass(frozen=True)
class DirEntry:
    """One item of a remote listing or search result."""

    name: str
    is_dir: bool = False
    size: int = 0
    modified: str = ""  # ISO 8601 as sent by the store
    parent: str = ""
    thumb: str = ""
    provider: str | None = None


@dataclass(frozen=True)
class DirListing:
    """One page of a remote directory listing."""

    entries: list[DirEntry]
    total: int


@dataclass(frozen=True)
class FileDetail:
    """A single remote file or folder, with its raw playable URL."""

    name: str
    is_dir: bool = False
    size: int = 0
    modified: str = ""
    thumb: str = ""
    provider: str | None = None
    raw_url: str = ""


# ============================================================================
# Catalog
# ============================================================================


@dataclass
class CatalogEntry:
    """One browsable or playable unit returned to the client."""

    id: str
    name: str
    kind: str = KIND_FILE
    pic: str = ""
    remarks: str = ""
    time: str = ""
    size: int = 0
    # detail-only fields
    type_name: str = ""
    actor: str = ""
    director: str = ""
    lang: str = ""
    area: str = ""
    year: str = ""
    content: str = ""
    play_from: str | None = None
    play_url: str = ""


@dataclass(frozen=True)
class Category:
    """A top-level browse root: one per configured site."""

    type_id: str  # site$/
    type_name: str


@dataclass
class CatalogPage:
    """An ordered page of catalog entries with pagination bookkeeping."""

    entries: list[CatalogEntry] = field(default_factory=list)
    page: int = 1
    total: int = 0
    page_size: int = 0

    @property
    def page_count(self) -> int:
        if self.page_size <= 0:
            return 1 if self.total else 0
        return math.ceil(self.total / self.page_size)

    @classmethod
    def single(cls, entries: list[CatalogEntry]) -> "CatalogPage":
        """A page holding exactly *entries* (search results, detail views)."""
        return cls(entries=entries, page=1, total=len(entries), page_size=len(entries))


@dataclass
class PlaylistMetadata:
    """Descriptive fields set by ``#type``, ``#actor``, ... directives."""

    name: str = ""
    type: str = ""
    actor: str = ""
    director: str = ""
    content: str = ""
    lang: str = ""
    area: str = ""
    year: str = ""

    def merged(self, other: "PlaylistMetadata") -> "PlaylistMetadata":
        """Copy of self with every non-empty field of *other* laid on top."""
        result = PlaylistMetadata(**self.__dict__)
        for key, value in other.__dict__.items():
            if value:
                setattr(result, key, value)
        return result


@dataclass
class PlaylistGroup:
    """A named group of episodes from playlist text or a folder listing.

    ``lines`` holds the raw episode lines in order of appearance; ``episodes``
    is filled with ``(label, target_file)`` pairs once the lines are
    converted (auto mode fills it directly).
    """

    name: str = PLAYLIST_NAME
    cover: str = LIST_PIC
    metadata: PlaylistMetadata = field(default_factory=PlaylistMetadata)
    lines: list[str] = field(default_factory=list)
    episodes: list[tuple[str, str]] = field(default_factory=list)

    @property
    def episode_count(self) -> int:
        return len(self.lines) or len(self.episodes)

    @property
    def remark(self) -> str:
        return episode_remark(self.episode_count)
