"""Application entry point for the chirp feed server."""

from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional

import uvicorn
from art import tprint

import settings
from adapters.http_api import create_app
from adapters.log_retention import clean_old_logs
from adapters.log_setup import configure_logging
from adapters.sqlite_storage import SQLiteMessageStore
from core.cache import DerivedViewCache
from core.feed_service import FeedService
from core.periodic import PeriodicTask

NAME = "CHIRP"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    configure_logging(settings.LOGGING or {}, settings.PROJECT_ROOT)


def _open_store() -> SQLiteMessageStore:
    directory = os.path.dirname(settings.DB_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)
    store = SQLiteMessageStore(settings.DB_PATH)
    store.init_db()
    return store


def _build_background_tasks(cache: DerivedViewCache) -> List[PeriodicTask]:
    tasks = [PeriodicTask("cache-sweeper", settings.CACHE.sweep_interval_seconds, cache.sweep)]
    retention = settings.LOG_RETENTION
    if retention.enabled:
        tasks.append(
            PeriodicTask(
                "log-retention",
                retention.interval_seconds,
                lambda: clean_old_logs(retention.directory, retention.keep_days),
            )
        )
    return tasks


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting chirp")

    store = _open_store()
    # One cache per process, owned here and handed to the service and sweeper.
    cache = DerivedViewCache(stripes=settings.CACHE_STRIPES)
    service = FeedService(store, cache, settings.CACHE, settings.IMAGES)
    app = create_app(service, _build_background_tasks(cache))

    logger.info("Serving on %s:%s", settings.SERVER_HOST, settings.SERVER_PORT)
    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT, log_config=None)
    logger.info("Server stopped")


def _post(args: argparse.Namespace) -> None:
    _configure_logging()
    store = _open_store()
    message = store.add_message(
        user_id=args.author_id,
        username=args.username,
        content=args.content,
        image_url=args.image_url,
        private=args.private,
    )
    print(f"Saved message {message.id}")


def _clean_logs() -> None:
    _configure_logging()
    retention = settings.LOG_RETENTION
    removed = clean_old_logs(retention.directory, retention.keep_days)
    print(f"Removed {removed} log files older than {retention.keep_days} days")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="chirp")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the feed server")

    post_parser = subparsers.add_parser("post", help="Store a message")
    post_parser.add_argument("content", help="Message text (markdown, #tags allowed)")
    post_parser.add_argument("--author-id", type=int, default=1)
    post_parser.add_argument("--username")
    post_parser.add_argument("--image-url")
    post_parser.add_argument("--private", action="store_true")

    subparsers.add_parser("clean-logs", help="Delete log files past the retention horizon")

    args = parser.parse_args(argv)
    if args.command == "post":
        _post(args)
        return
    if args.command == "clean-logs":
        _clean_logs()
        return
    _run()


if __name__ == "__main__":
    main()
