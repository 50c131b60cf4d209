# Natural sort - order names the way people read them ("ep2" before "ep10").
# Created: 2026-10-19

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cmp_to_key

_RUNS = re.compile(r"\d+|\D+")


@dataclass(frozen=True)
class FileNameParts:
    """A name split into alternating digit / non-digit runs, case preserved."""

    parts: tuple[str, ...]

    @classmethod
    def parse(cls, name: str) -> FileNameParts:
        return cls(tuple(_RUNS.findall(name)))


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_parts(left: FileNameParts, right: FileNameParts) -> int:
    for a, b in zip(left.parts, right.parts):
        if a.isdecimal() and b.isdecimal():
            result = _cmp(int(a), int(b))
        else:
            result = _cmp(a, b)
        if result:
            return result
    return _cmp(len(left.parts), len(right.parts))


def compare(left: str, right: str) -> int:
    """Three-way natural comparison of two names: -1, 0 or 1."""
    return compare_parts(FileNameParts.parse(left), FileNameParts.parse(right))


natural_key = cmp_to_key(compare)


def natural_sorted(names, key=None, reverse: bool = False) -> list:
    """``sorted`` with natural ordering; *key* picks the name out of each item."""
    if key is None:
        return sorted(names, key=natural_key, reverse=reverse)
    return sorted(names, key=lambda item: natural_key(key(item)), reverse=reverse)
