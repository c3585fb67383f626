"""Logging setup for the chirp process.

Console output and a size-rotated file under the retention directory, both
driven by the ``logging`` section of config.json.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_handlers(config: dict, project_root: str) -> List[logging.Handler]:
    """Return the handlers described by ``config``; empty when logging is off."""

    if not config.get("enabled", False):
        return []

    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = []

    if config.get("console", True):
        handlers.append(logging.StreamHandler())

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/chirp.log")
        if not os.path.isabs(path):
            path = os.path.join(project_root, path)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        # Rotated backups are what the log-retention task later deletes.
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
                backupCount=int(file_cfg.get("backup_count", 5)),
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config: dict, project_root: str) -> None:
    handlers = build_handlers(config, project_root)
    if not handlers:
        return
    logging.basicConfig(level=handlers[0].level, handlers=handlers)
