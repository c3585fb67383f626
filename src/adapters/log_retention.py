"""Log directory retention.

Deletes rotated log files whose modification time is older than the
retention horizon. Used by the periodic retention task and the CLI.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Callable

LOGGER = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def clean_old_logs(directory: str, keep_days: int, clock: Callable[[], float] = time.time) -> int:
    """Delete files in ``directory`` older than ``keep_days`` and return the count."""

    if keep_days < 0:
        raise ValueError(f"keep_days must not be negative, got {keep_days}")

    cutoff = clock() - keep_days * SECONDS_PER_DAY
    try:
        with os.scandir(directory) as iterator:
            entries = list(iterator)
    except FileNotFoundError:
        return 0
    except OSError:
        LOGGER.warning("Cannot read log directory %s", directory, exc_info=True)
        return 0

    removed = 0
    for entry in entries:
        if not entry.is_file(follow_symlinks=False):
            continue
        try:
            if entry.stat().st_mtime >= cutoff:
                continue
            os.remove(entry.path)
        except OSError:
            LOGGER.warning("Failed to delete old log file %s", entry.path, exc_info=True)
            continue
        removed += 1

    if removed:
        LOGGER.info("Log retention removed %s files from %s", removed, directory)
    return removed
