"""Static configuration for chirp.

All user-editable settings (database, server, cache TTLs, logging) live in a
single JSON file for quick edits without touching Python.
"""

import json
import os

from dotenv import load_dotenv

from core.config import CacheConfig, ImagesConfig, LogRetentionConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# .env may point CHIRP_CONFIG elsewhere.
load_dotenv()

CONFIG_PATH = os.getenv("CHIRP_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite database.
DB_PATH = _resolve_path(_CONFIG.get("database", {}).get("path", "data/chirp.db"))

_server = _CONFIG.get("server", {})
SERVER_HOST = _server.get("host", "127.0.0.1")
SERVER_PORT = int(_server.get("port", 6277))

# TTLs are fixed per view kind; the sweeper runs independently of traffic.
_cache = _CONFIG.get("cache", {})
CACHE = CacheConfig(
    tags_ttl_seconds=float(_cache.get("tags_ttl_seconds", 300)),
    images_ttl_seconds=float(_cache.get("images_ttl_seconds", 600)),
    feed_ttl_seconds=float(_cache.get("feed_ttl_seconds", 60)),
    sweep_interval_seconds=float(_cache.get("sweep_interval_seconds", 600)),
)
CACHE_STRIPES = int(_cache.get("stripes", 16))

# Private messages contribute images unless explicitly turned off.
IMAGES = ImagesConfig(include_private=bool(_CONFIG.get("images", {}).get("include_private", True)))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})

_retention = _CONFIG.get("log_retention", {})
LOG_RETENTION = LogRetentionConfig(
    enabled=bool(_retention.get("enabled", True)),
    directory=_resolve_path(_retention.get("directory", "logs")),
    keep_days=int(_retention.get("keep_days", 7)),
    interval_seconds=float(_retention.get("interval_seconds", 24 * 60 * 60)),
)
