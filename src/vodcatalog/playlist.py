# Playlist parser - playlist.txt directives and auto playlists from a listing.
# Created: 2026-10-19
#
# playlist.txt format, one item per line:
#
#   #cover http://host/cover.jpg      cover of the current group
#   #actor Someone                    metadata (#name #type #actor #director
#                                     #content #lang #area #year)
#   Season 1,#genre#,http://host/s1.jpg
#   Episode 1,s01e01.mp4              one episode: label,file
#
# Lines before the first ",#genre#" belong to an unnamed default group
# (listed under the generic playlist name).
# A group is only emitted once it holds at least one episode line.

from __future__ import annotations

import logging
from enum import Enum, auto

from vodcatalog.errors import MalformedPlaylistLine
from vodcatalog.models import LIST_PIC, PLAYLIST_NAME, PlaylistGroup, PlaylistMetadata

logger = logging.getLogger(__name__)

GENRE_MARKER = ",#genre#"
COVER_DIRECTIVE = "#cover"

_METADATA_DIRECTIVES = {
    "#name": "name",
    "#type": "type",
    "#actor": "actor",
    "#director": "director",
    "#content": "content",
    "#lang": "lang",
    "#area": "area",
    "#year": "year",
}


class ParserState(Enum):
    BEFORE_FIRST_GROUP = auto()
    IN_GROUP = auto()


class LineKind(Enum):
    BLANK = auto()
    COVER = auto()
    METADATA = auto()
    GENRE = auto()
    EPISODE = auto()


def classify(text: str) -> LineKind:
    """Classify one stripped line."""
    if not text:
        return LineKind.BLANK
    if text.startswith(COVER_DIRECTIVE):
        return LineKind.COVER
    if text.startswith("#"):
        return LineKind.METADATA
    if GENRE_MARKER in text:
        return LineKind.GENRE
    return LineKind.EPISODE


def strip_extension(name: str) -> str:
    index = name.rfind(".")
    if index > 0:
        return name[:index]
    return name


def parse_ordinal(path: str) -> int | None:
    """Return N from a path ending in ``.../playlist.txt#N``, else None."""
    last = path.rsplit("/", 1)[-1]
    parts = last.split("#")
    if len(parts) >= 2 and parts[-1].isdigit():
        return int(parts[-1])
    return None


def strip_ordinal(path: str) -> str:
    """Drop a trailing ``#N`` from *path*."""
    if parse_ordinal(path) is None:
        return path
    return path.rsplit("#", 1)[0]


def parse_episode(line: str) -> tuple[str, str]:
    """Split ``label,file`` into its two fields.

    Raises:
        MalformedPlaylistLine: there is no non-empty second field.
    """
    parts = line.split(",")
    if len(parts) < 2 or not parts[1].strip():
        raise MalformedPlaylistLine(line)
    return parts[0].strip(), parts[1].strip()


class PlaylistParser:
    """Line-driven state machine turning playlist text into PlaylistGroups.

    Feed lines with ``feed()`` and call ``finish()`` once. When
    ``stop_after`` is set, parsing stops as soon as more than that many
    groups have been completed.
    """

    def __init__(self, stop_after: int | None = None):
        self.state = ParserState.BEFORE_FIRST_GROUP
        self.current = PlaylistGroup(name="")
        self.groups: list[PlaylistGroup] = []
        self.seen_metadata = PlaylistMetadata()
        self.stop_after = stop_after
        self.done = False

    def feed(self, line: str) -> None:
        if self.done:
            return
        text = line.strip()
        kind = classify(text)

        if kind is LineKind.BLANK:
            return
        if kind is LineKind.COVER:
            self.current.cover = text[len(COVER_DIRECTIVE) :].strip()
        elif kind is LineKind.METADATA:
            self._apply_metadata(text)
        elif kind is LineKind.GENRE:
            self._flush()
            if self.stop_after is not None and len(self.groups) > self.stop_after:
                self.done = True
                return
            self._start_group(text)
        else:
            self.current.lines.append(text)

    def finish(self) -> list[PlaylistGroup]:
        if not self.done:
            self._flush()
            self.done = True
        return self.groups

    def _start_group(self, text: str) -> None:
        parts = text.split(",")
        cover = parts[2].strip() if len(parts) >= 3 and parts[2].strip() else LIST_PIC
        self.current = PlaylistGroup(name=parts[0].strip(), cover=cover)
        self.state = ParserState.IN_GROUP

    def _flush(self) -> None:
        if self.current.lines:
            self.groups.append(self.current)
        self.current = PlaylistGroup(name="")

    def _apply_metadata(self, text: str) -> None:
        for directive, attr in _METADATA_DIRECTIVES.items():
            if text.startswith(directive):
                value = text[len(directive) :].strip()
                setattr(self.current.metadata, attr, value)
                if value:
                    setattr(self.seen_metadata, attr, value)
                return
        logger.debug("Ignoring playlist directive %r", text)


def parse_playlist(text: str) -> list[PlaylistGroup]:
    """Parse playlist text into its non-empty groups, in file order."""
    parser = PlaylistParser()
    for line in text.splitlines():
        parser.feed(line)
    return parser.finish()


def read_group(text: str, index: int) -> tuple[PlaylistGroup | None, PlaylistMetadata]:
    """Parse the group at *index* and convert its lines into episodes.

    Returns the group (None if the text has fewer groups) and the metadata
    from every directive read before parsing stopped. Malformed episode
    lines are skipped with a warning.
    """
    parser = PlaylistParser(stop_after=index)
    for line in text.splitlines():
        parser.feed(line)
        if parser.done:
            break
    groups = parser.finish()
    if index >= len(groups):
        return None, parser.seen_metadata

    group = groups[index]
    for line in group.lines:
        try:
            group.episodes.append(parse_episode(line))
        except MalformedPlaylistLine as exc:
            logger.warning("%s", exc)
    return group, parser.seen_metadata


def group_from_files(names: list[str]) -> PlaylistGroup:
    """Auto mode: one group with one ``(name without extension, name)`` per file."""
    group = PlaylistGroup(name=PLAYLIST_NAME, cover=LIST_PIC)
    group.episodes = [(strip_extension(name), name) for name in names]
    return group
