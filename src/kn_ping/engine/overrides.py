"""CloudEvent override parsing and merging.

Overrides are given on the command line as ``key=value`` entries.  A key
with a trailing ``-`` (``key-``), or a value of exactly ``-`` (``key=-``),
marks the key for removal.  When the same key is both set and removed in
one request, removal wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kn_ping.engine.errors import MalformedInputError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

REMOVAL_SUFFIX = "-"
_DELIMITER = "="


def parse_overrides(entries: Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` entries into a dict.

    Values may themselves contain ``=``; only the first one splits.  An entry
    without ``=`` maps its key to ``""`` so that ``key-`` removal markers can
    be written without a value.

    Raises:
        MalformedInputError: On an empty key or a key given more than once.
    """
    entries = list(entries)
    parsed: dict[str, str] = {}
    errors: list[str] = []
    for entry in entries:
        key, _, value = entry.partition(_DELIMITER)
        if not key:
            errors.append(f"override {entry!r} has an empty key")
        elif key in parsed:
            errors.append(f"override key {key!r} is given more than once in {entries}")
        else:
            parsed[key] = value
    if errors:
        raise MalformedInputError(errors)
    return parsed


def _removal_key(key: str, value: str) -> str | None:
    """Return the key to remove if this entry is a removal marker."""
    if key.endswith(REMOVAL_SUFFIX) and len(key) > len(REMOVAL_SUFFIX):
        return key[: -len(REMOVAL_SUFFIX)]
    if value == REMOVAL_SUFFIX:
        return key
    return None


def split_removals(requested: Mapping[str, str]) -> tuple[dict[str, str], list[str]]:
    """Partition requested overrides into ``(to_set, to_remove)``.

    ``to_remove`` holds the stripped key names, sorted and deduplicated.
    The input mapping is left untouched.
    """
    to_set: dict[str, str] = {}
    to_remove: set[str] = set()
    for key, value in requested.items():
        removed = _removal_key(key, value)
        if removed is None:
            to_set[key] = value
        else:
            to_remove.add(removed)
    return to_set, sorted(to_remove)


def merge_overrides(existing: Mapping[str, str], requested: Mapping[str, str]) -> dict[str, str]:
    """Merge *requested* into a copy of *existing*.

    Plain entries are inserted or overwritten first, then every removal
    marker deletes its key.  Removing an absent key is a no-op.
    """
    to_set, to_remove = split_removals(requested)
    merged = dict(existing)
    merged.update(to_set)
    for key in to_remove:
        merged.pop(key, None)
    return merged
