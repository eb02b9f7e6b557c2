"""Descending version ordering for component versions.

Versions are free-form strings. Strings shaped like ``[prefix]N(.N)*[-prerelease][+build]``
compare numerically (trailing ``.0`` segments are insignificant, a release is newer
than any of its pre-releases). Anything else (``master``, ``dev``) is newer than every
parseable version and compares lexically among its peers. Remaining ties fall back
to the raw string, which keeps the order total.
"""

from __future__ import annotations

import re
from functools import cmp_to_key, lru_cache
from typing import Iterable, List, Tuple

_VERSION_PATTERN = re.compile(
    r"^(?P<prefix>[A-Za-z]*)"
    r"(?P<numbers>\d+(?:\.\d+)*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z]+(?:[.-][0-9A-Za-z]+)*))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)

VersionKey = Tuple[object, ...]


@lru_cache(maxsize=1024)
def version_sort_key(version: str) -> VersionKey:
    """Return a key where a greater key means a newer version."""
    match = _VERSION_PATTERN.match(version)
    if match is None:
        return (1, version)

    numbers = [int(segment) for segment in match.group("numbers").split(".")]
    while len(numbers) > 1 and numbers[-1] == 0:
        numbers.pop()

    prerelease = match.group("prerelease")
    if prerelease is None:
        release_rank: Tuple[object, ...] = (1,)
    else:
        release_rank = (0, tuple(_identifier_key(part) for part in re.split(r"[.-]", prerelease)))
    return (0, tuple(numbers), release_rank, version)


def version_compare_desc(a: str, b: str) -> int:
    """Comparator ordering newest first: -1 if ``a`` is newer, 1 if ``b`` is newer."""
    if a == b:
        return 0
    key_a = version_sort_key(a)
    key_b = version_sort_key(b)
    if key_a > key_b:
        return -1
    if key_a < key_b:
        return 1
    return 0


def sort_versions_desc(versions: Iterable[str]) -> List[str]:
    """Return ``versions`` ordered newest first."""
    return sorted(versions, key=cmp_to_key(version_compare_desc))


def _identifier_key(identifier: str) -> Tuple[int, object]:
    # numeric identifiers rank below alphanumeric ones
    if identifier.isdigit():
        return (0, int(identifier))
    return (1, identifier)


__all__ = [
    "sort_versions_desc",
    "version_compare_desc",
    "version_sort_key",
]
