from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from core.models import Message

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_message(
    message_id: int,
    content: str,
    *,
    user_id: int = 1,
    username: Optional[str] = "alice",
    image_url: Optional[str] = None,
    private: bool = False,
    minutes: int = 0,
) -> Message:
    return Message(
        id=message_id,
        user_id=user_id,
        username=username,
        content=content,
        image_url=image_url,
        private=private,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
