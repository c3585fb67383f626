"""HTTP binding for the derived views.

Routes translate query parameters into FeedService calls and wrap results in
the ``{code, data}`` envelope. Endpoints are plain ``def`` functions so
FastAPI runs them on its worker thread pool; the store calls block.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Iterable, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse

from core.feed_service import FeedService
from core.periodic import PeriodicTask
from core.tag_aggregator import to_tag_counts

LOGGER = logging.getLogger(__name__)

CODE_OK = 1
CODE_ERROR = 0

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


MAX_ID = 2**63 - 1


def _parse_int(raw: Optional[str]) -> Optional[int]:
    # ASCII digits only; str.isdigit alone also accepts other scripts' numerals.
    if raw is None or not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    # SQLite integers are signed 64-bit.
    return value if value <= MAX_ID else None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": CODE_ERROR, "msg": message})


def create_app(service: FeedService, background_tasks: Iterable[PeriodicTask] = ()) -> FastAPI:
    """Build the app; background tasks live exactly as long as the app does."""

    tasks = list(background_tasks)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for task in tasks:
            task.start()
        try:
            yield
        finally:
            for task in tasks:
                await task.stop()

    app = FastAPI(title="chirp", lifespan=lifespan)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "cache_entries": len(service.cache)}

    @app.get("/api/messages/tags/{tag}")
    def messages_by_tag(
        tag: str,
        author_id: Optional[str] = Query(None, alias="authorId"),
        username: Optional[str] = None,
    ) -> dict:
        # An unparseable authorId is ignored rather than rejected.
        messages = service.messages_by_tag(tag, author_id=_parse_int(author_id), username=username)
        return {"code": CODE_OK, "data": [message.to_dict() for message in messages]}

    @app.get("/api/tags")
    def tags() -> JSONResponse:
        table = service.tag_counts()
        data = [{"name": item.name, "count": item.count} for item in to_tag_counts(table)]
        return JSONResponse(
            content={"code": CODE_OK, "data": data, "timestamp": int(time.time())},
            headers=NO_CACHE_HEADERS,
        )

    @app.get("/api/images")
    def images() -> dict:
        return {"code": CODE_OK, "data": [image.to_dict() for image in service.images()]}

    @app.get("/api/messages/{message_id}")
    def get_message(message_id: str):
        parsed = _parse_int(message_id)
        if parsed is None:
            return _error(400, "invalid message id")
        message = service.get_message(parsed)
        if message is None:
            return _error(404, "message not found")
        return {"code": CODE_OK, "data": message.to_dict()}

    return app
