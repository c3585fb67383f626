"""Image reference extraction across the message corpus (core domain)."""

from __future__ import annotations

from typing import Iterable, List

from core.content_parser import extract_image_urls
from core.models import ImageReference, Message


def message_images(message: Message) -> List[ImageReference]:
    """Return the dedicated image first, then inline images in content order."""

    urls: List[str] = []
    if message.image_url:
        urls.append(message.image_url)
    urls.extend(extract_image_urls(message.content))
    return [
        ImageReference(message_id=message.id, image_url=url, created_at=message.created_at)
        for url in urls
    ]


def extract_images(messages: Iterable[Message]) -> List[ImageReference]:
    """Flatten image references, preserving message iteration order.

    No visibility filter is applied here; callers decide which messages to pass.
    """

    images: List[ImageReference] = []
    for message in messages:
        images.extend(message_images(message))
    return images
