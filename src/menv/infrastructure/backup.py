"""Timestamped backups taken before a destructive file rewrite.

Backups sit next to the original as ``<file>.backup.YYYYmmdd_HHMMSS``.
Only the newest ``max_count`` backups of each file are kept.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

BACKUP_MARKER = ".backup."


def backup_name(path: Path, when: datetime | None = None) -> Path:
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return path.with_name(f"{path.name}{BACKUP_MARKER}{stamp}")


def create_backup(path: Path, *, max_count: int = 10) -> Path | None:
    """Copy *path* aside before it is rewritten.

    Returns the backup path, or None when *path* does not exist (nothing
    to lose). Raises ``OSError`` if the copy fails.
    """
    if not path.is_file():
        return None
    target = backup_name(path)
    counter = 1
    while target.exists():
        target = target.with_name(f"{backup_name(path).name}.{counter}")
        counter += 1
    shutil.copy2(path, target)
    logger.debug("Created backup: %s", target)
    prune_backups(path, max_count=max_count)
    return target


def prune_backups(path: Path, *, max_count: int) -> list[Path]:
    """Remove old backups of *path* beyond *max_count* (keep newest)."""
    if max_count <= 0:
        return []
    backups = sorted(path.parent.glob(f"{path.name}{BACKUP_MARKER}*"))
    stale = backups[: max(0, len(backups) - max_count)]
    for old in stale:
        old.unlink(missing_ok=True)
        logger.debug("Pruned backup: %s", old)
    return stale
