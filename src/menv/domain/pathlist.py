"""PATH-like list engine.

Values such as ``PATH`` or ``PYTHONPATH`` are ordered, colon-delimited
lists. Parsing keeps empty entries (``::``) at their positions so that a
value can be analyzed, edited, and re-joined without shifting anything.

Entries are compared textually: ``/usr/bin`` and ``/usr/bin/`` are
different entries, and symlinks are not resolved.
"""

from __future__ import annotations

import os
from collections import Counter
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

SEPARATOR = ":"

DEFAULT_PATH_LIKE: tuple[str, ...] = (
    "PATH",
    "LIBRARY_PATH",
    "LD_LIBRARY_PATH",
    "DYLD_LIBRARY_PATH",
    "PKG_CONFIG_PATH",
    "MANPATH",
    "INFOPATH",
    "CLASSPATH",
    "PYTHONPATH",
    "NODE_PATH",
)


class PathMode(StrEnum):
    """How a new entry joins an existing PATH-like value."""

    APPEND = "append"
    PREPEND = "prepend"
    REPLACE = "replace"


class PathEntry(BaseModel):
    """One position in a parsed PATH-like value."""

    model_config = {"frozen": True}

    position: int
    text: str
    exists: bool = False
    occurrence_count: int = 1

    @property
    def is_empty(self) -> bool:
        return self.text == ""


class PathAnalysis(BaseModel):
    """Composition statistics for a parsed PATH-like value."""

    model_config = {"frozen": True}

    total_entries: int = 0
    unique_entries: int = 0
    duplicate_count: int = 0
    empty_count: int = 0
    existing_dir_count: int = 0
    nonexistent_count: int = 0
    duplicate_groups: dict[str, list[int]] = Field(default_factory=dict)

    @property
    def is_clean(self) -> bool:
        return not (self.duplicate_count or self.empty_count or self.nonexistent_count)

    def recommendations(self) -> list[str]:
        tips: list[str] = []
        if self.duplicate_count:
            tips.append("Remove duplicate entries to improve lookup performance")
        if self.empty_count:
            tips.append("Remove empty entries (::), they resolve to the current directory")
        if self.nonexistent_count:
            tips.append("Consider removing non-existent directories")
        if not tips:
            tips.append("Looks clean! No issues detected.")
        return tips


PathList = tuple[PathEntry, ...]


def is_path_like(name: str, path_like: Iterable[str] = DEFAULT_PATH_LIKE) -> bool:
    """Check whether *name* holds a colon-delimited list of locations."""
    return name in set(path_like)


def dir_exists(text: str) -> bool:
    """Directory check that treats permission problems as non-existing."""
    try:
        return os.path.isdir(text)
    except OSError:
        return False


def split_value(value: str) -> list[str]:
    """Split *value* on colons; the empty string has no entries."""
    if value == "":
        return []
    return value.split(SEPARATOR)


def parse(value: str, *, exists: Callable[[str], bool] = dir_exists) -> PathList:
    """Parse a colon-delimited value into positioned entries."""
    texts = split_value(value)
    counts = Counter(texts)
    return tuple(
        PathEntry(
            position=index,
            text=text,
            exists=bool(text) and exists(text),
            occurrence_count=counts[text],
        )
        for index, text in enumerate(texts, start=1)
    )


def join(entries: Iterable[PathEntry | str]) -> str:
    """Join entries (or raw texts) back into a colon-delimited value."""
    return SEPARATOR.join(e.text if isinstance(e, PathEntry) else e for e in entries)


def analyze(path_list: PathList) -> PathAnalysis:
    """Summarize duplicates, empties, and missing directories."""
    texts = [entry.text for entry in path_list]
    unique = set(texts)
    groups: dict[str, list[int]] = {}
    for entry in path_list:
        if entry.occurrence_count > 1 and entry.text:
            groups.setdefault(entry.text, []).append(entry.position)

    empty = sum(1 for entry in path_list if entry.is_empty)
    existing = sum(1 for entry in path_list if not entry.is_empty and entry.exists)
    return PathAnalysis(
        total_entries=len(texts),
        unique_entries=len(unique),
        duplicate_count=len(texts) - len(unique),
        empty_count=empty,
        existing_dir_count=existing,
        nonexistent_count=len(texts) - existing - empty,
        duplicate_groups=groups,
    )


def combine(current: str, entry: str, mode: PathMode = PathMode.APPEND) -> str:
    """Add *entry* to *current* at the end (append) or the front (prepend)."""
    if mode is PathMode.REPLACE:
        return entry
    if not current:
        return entry
    if mode is PathMode.PREPEND:
        return f"{entry}{SEPARATOR}{current}"
    return f"{current}{SEPARATOR}{entry}"


def contains_entry(path_list: PathList, entry: str) -> bool:
    """Exact textual membership test."""
    return any(item.text == entry for item in path_list)


def positions_of(path_list: PathList, entry: str) -> list[int]:
    """1-based positions where *entry* occurs."""
    return [item.position for item in path_list if item.text == entry]


def remove_entry(value: str, entry: str) -> str:
    """Drop every exact occurrence of *entry*, keeping the rest in order."""
    return SEPARATOR.join(text for text in split_value(value) if text != entry)


def value_contains(value: str | None, entry: str) -> bool:
    """Shortcut for ``entry in split_value(value)``."""
    return bool(value) and entry in split_value(value or "")


def entry_rows(path_list: PathList) -> list[dict[str, Any]]:
    """Flatten entries into dicts for result payloads."""
    return [
        {
            "position": item.position,
            "text": item.text,
            "exists": item.exists,
            "empty": item.is_empty,
            "occurrences": item.occurrence_count,
        }
        for item in path_list
    ]
