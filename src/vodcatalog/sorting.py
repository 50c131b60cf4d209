# Sort keys for catalog listings.
# Created: 2026-10-19

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from enum import Enum

from vodcatalog.errors import UnrecognizedSort
from vodcatalog.models import CatalogEntry
from vodcatalog.naturalsort import natural_key

logger = logging.getLogger(__name__)

_FRACTION = re.compile(r"(\.\d{6})\d+")
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def parse_modified(value: str) -> datetime | None:
    """Parse an ISO 8601 timestamp as sent by the store; None if it is not one.

    A trailing ``Z`` and naive values both mean UTC. Fractional seconds
    beyond microseconds are truncated.
    """
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(_FRACTION.sub(r"\1", text))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _time_key(value: str) -> tuple[datetime, str]:
    # unparseable times sort first, then by their raw text
    return parse_modified(value) or _EPOCH, value


class SortField(str, Enum):
    NAME = "name"
    TIME = "time"
    SIZE = "size"


class SortKey(Enum):
    """``field,direction`` as accepted from the client, plus NONE (keep API order)."""

    NONE = None
    NAME_ASC = (SortField.NAME, False)
    NAME_DESC = (SortField.NAME, True)
    TIME_ASC = (SortField.TIME, False)
    TIME_DESC = (SortField.TIME, True)
    SIZE_ASC = (SortField.SIZE, False)
    SIZE_DESC = (SortField.SIZE, True)

    @property
    def text(self) -> str:
        if self.value is None:
            return ""
        sort_field, descending = self.value
        return f"{sort_field.value},{'desc' if descending else 'asc'}"

    def apply(self, entries: list[CatalogEntry]) -> None:
        """Sort *entries* in place. NONE leaves them untouched."""
        if self.value is None:
            return
        sort_field, descending = self.value
        if sort_field is SortField.NAME:
            entries.sort(key=lambda e: natural_key(e.name), reverse=descending)
        elif sort_field is SortField.TIME:
            entries.sort(key=lambda e: _time_key(e.time), reverse=descending)
        else:
            entries.sort(key=lambda e: e.size, reverse=descending)


DEFAULT_SORT = SortKey.NAME_ASC

_BY_TEXT = {key.text: key for key in SortKey if key is not SortKey.NONE}

# Filter options shown to the client, in display order.
SORT_FILTERS: list[tuple[str, str]] = [
    ("原始顺序", ""),
    ("名字⬆️", SortKey.NAME_ASC.text),
    ("名字⬇️", SortKey.NAME_DESC.text),
    ("时间⬆️", SortKey.TIME_ASC.text),
    ("时间⬇️", SortKey.TIME_DESC.text),
    ("大小⬆️", SortKey.SIZE_ASC.text),
    ("大小⬇️", SortKey.SIZE_DESC.text),
]


def parse_sort_key(text: str | None, *, strict: bool = False) -> SortKey:
    """Map a client sort string to a SortKey.

    ``None`` means "not given" and yields DEFAULT_SORT. Any other unknown
    string yields SortKey.NONE, or raises UnrecognizedSort when *strict*.
    """
    if text is None:
        return DEFAULT_SORT
    key = _BY_TEXT.get(text.strip())
    if key is not None:
        return key
    if strict:
        raise UnrecognizedSort(text)
    if text:
        logger.debug("Unrecognized sort %r, keeping listing order", text)
    return SortKey.NONE
