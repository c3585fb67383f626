"""Derived-view service.

This module is transport-agnostic. It only relies on the store port and an
injected cache, enabling other frontends or adapters without changes here.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Hashable, List, Mapping, Optional, TypeVar

from core.cache import MISS, DerivedViewCache, ViewKind
from core.config import CacheConfig, ImagesConfig
from core.image_extractor import extract_images
from core.models import ImageReference, Message
from core.ports import MessageStorePort, StoreError
from core.query_filter import ALL_MESSAGES, VISIBLE_MESSAGES, MessageQuery, build_tag_query, filter_tag_matches
from core.tag_aggregator import count_tags

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class FeedService:
    """Serves tag counts, image lists and tag feeds through the cache."""

    def __init__(
        self,
        store: MessageStorePort,
        cache: DerivedViewCache,
        cache_config: CacheConfig,
        images_config: Optional[ImagesConfig] = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._cache_config = cache_config
        self._images = images_config or ImagesConfig()

    @property
    def cache(self) -> DerivedViewCache:
        return self._cache

    def messages_by_tag(
        self,
        tag: Optional[str],
        author_id: Optional[int] = None,
        username: Optional[str] = None,
    ) -> List[Message]:
        """Return visible messages tagged ``tag``, newest first."""

        query = build_tag_query(tag, author_id=author_id, username=username)
        if query is None:
            return []

        def compute() -> Optional[List[Message]]:
            candidates = self._load(query)
            if candidates is None:
                return None
            return filter_tag_matches(candidates, tag)

        key = (ViewKind.FEED.value, tag, query.author_id, query.username)
        return self._cached(ViewKind.FEED, key, compute, [])

    def tag_counts(self) -> dict[str, int]:
        """Return the unordered tag frequency table over visible messages."""

        def compute() -> Optional[dict[str, int]]:
            messages = self._load(VISIBLE_MESSAGES)
            if messages is None:
                return None
            return count_tags(messages)

        return self._cached(ViewKind.TAGS, (ViewKind.TAGS.value,), compute, {})

    def images(self) -> List[ImageReference]:
        """Return image references for every message, newest message first."""

        query = ALL_MESSAGES if self._images.include_private else VISIBLE_MESSAGES

        def compute() -> Optional[List[ImageReference]]:
            messages = self._load(query)
            if messages is None:
                return None
            return extract_images(messages)

        return self._cached(ViewKind.IMAGES, (ViewKind.IMAGES.value,), compute, [])

    def get_message(self, message_id: int) -> Optional[Message]:
        """Look up a single message; store failures read as not found."""

        try:
            return self._store.get_message(message_id)
        except StoreError:
            LOGGER.warning("Message lookup failed for id=%s", message_id, exc_info=True)
            return None

    def _load(self, query: MessageQuery) -> Optional[List[Message]]:
        # Availability first: a failed listing renders as an empty view.
        try:
            return self._store.query_messages(query)
        except StoreError:
            LOGGER.warning("Message listing failed for %s", query, exc_info=True)
            return None

    def _cached(
        self,
        kind: ViewKind,
        key: Hashable,
        compute: Callable[[], Optional[T]],
        fallback: T,
    ) -> T:
        cached = self._cache.get(key)
        if cached is not MISS:
            return _thaw(cached)

        # Concurrent misses on one key may each recompute; the last put wins.
        value = compute()
        if value is None:
            return fallback
        frozen = _freeze(value)
        self._cache.put(key, frozen, self._cache_config.ttl_for(kind))
        LOGGER.debug("Cached %s view %s", kind.value, key)
        return _thaw(frozen)


def _freeze(value: Any) -> Any:
    """Snapshot a view so the cache never holds an object a caller can mutate."""

    if isinstance(value, Mapping):
        return MappingProxyType(dict(value))
    return tuple(value)


def _thaw(value: Any) -> Any:
    # Every caller gets its own copy; the cached snapshot stays untouched.
    if isinstance(value, Mapping):
        return dict(value)
    return list(value)
