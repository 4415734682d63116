"""Retention sweeper for rotated log files.

Deletes files in the log directory whose name ends with the logger's
suffix and whose modification time is older than the retention window.
Deletion is best-effort: a file that cannot be removed is reported and
the sweep moves on. The sweep runs in a detached thread and never takes
the logger lock; callers pass in the configuration they read under it.

Version: 1.0.0
"""

from __future__ import annotations

import os
import threading
from datetime import datetime, timedelta

from logkeeper.core.logger import get_logger, log_context

logger = get_logger(__name__)


def retention_cutoff(max_storage_days: int, now: datetime | None = None) -> float:
    """Timestamp before which files are expired."""
    return ((now or datetime.now()) - timedelta(days=max_storage_days)).timestamp()


def sweep(
    directory: str,
    suffix: str,
    max_storage_days: int,
    now: datetime | None = None,
) -> list[str]:
    """Delete expired log files in ``directory``.

    Only regular files directly inside ``directory`` are considered;
    subdirectories and files with another suffix are left alone.

    Args:
        directory: Log directory to examine.
        suffix: File-name suffix of log files (e.g. ``.log``).
        max_storage_days: Retention window; negative disables the sweep.
        now: Reference time (defaults to the current time).

    Returns:
        Paths of the files that were removed.
    """
    if max_storage_days < 0:
        return []

    cutoff = retention_cutoff(max_storage_days, now)
    removed: list[str] = []

    try:
        entries = list(os.scandir(directory))
    except OSError as e:
        logger.error(f"Unable to scan log directory '{directory}': {e}")
        return removed

    for entry in entries:
        try:
            if not entry.name.endswith(suffix) or not entry.is_file(follow_symlinks=False):
                continue
            if entry.stat(follow_symlinks=False).st_mtime < cutoff:
                os.remove(entry.path)
                removed.append(entry.path)
        except OSError as e:
            logger.warning(f"Unable to delete old file '{entry.path}': {e}")

    if removed:
        logger.debug(log_context("sweep", directory=directory, removed=len(removed)))
    return removed


def start_sweep(directory: str, suffix: str, max_storage_days: int) -> threading.Thread | None:
    """Run ``sweep`` in a detached daemon thread.

    Returns:
        The started thread, or None when retention is disabled.
    """
    if max_storage_days < 0:
        return None
    thread = threading.Thread(
        target=sweep,
        args=(directory, suffix, max_storage_days),
        name="logkeeper-retention",
        daemon=True,
    )
    thread.start()
    return thread
