"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.cache import ViewKind


@dataclass(frozen=True)
class CacheConfig:
    """TTL per derived view kind and the background sweep interval."""

    tags_ttl_seconds: float = 300
    images_ttl_seconds: float = 600
    feed_ttl_seconds: float = 60
    sweep_interval_seconds: float = 600

    def ttl_for(self, kind: ViewKind) -> float:
        if kind is ViewKind.TAGS:
            return self.tags_ttl_seconds
        if kind is ViewKind.IMAGES:
            return self.images_ttl_seconds
        if kind is ViewKind.FEED:
            return self.feed_ttl_seconds
        raise ValueError(f"Unsupported view kind: {kind}")


@dataclass(frozen=True)
class ImagesConfig:
    """Whether images of private messages appear in the image list."""

    include_private: bool = True


@dataclass(frozen=True)
class LogRetentionConfig:
    """Log retention settings consumed by the retention task."""

    enabled: bool
    directory: str
    keep_days: int
    interval_seconds: float
