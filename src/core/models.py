"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to the storage or transport types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class Message:
    """A single post as read from the message store."""

    id: int
    user_id: int
    content: str
    private: bool
    created_at: datetime
    username: Optional[str] = None
    image_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.username,
            "content": self.content,
            "image_url": self.image_url or "",
            "private": self.private,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class TagCount:
    """Number of visible occurrences of one tag."""

    name: str
    count: int


@dataclass(frozen=True)
class ImageReference:
    """An image URL together with the message it came from."""

    message_id: int
    image_url: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.message_id,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat(),
        }
