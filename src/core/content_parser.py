"""Hashtag and inline image parsing (core domain).

Extraction and matching are deliberately separate rules: extraction splits a
token at whitespace or the next ``#``, while matching a requested tag needs a
word boundary so ``#cat`` never matches inside ``#category``.
"""

from __future__ import annotations

import re
from typing import List

TAG_PATTERN = re.compile(r"#([^\s#]+)")

# Media links posted as "#song?id=1" look like tags but are not topical.
INVALID_TAG_PATTERN = re.compile(r"[/?=&]|^(?:song|video|playlist)\?id=\d+$")

IMAGE_PATTERN = re.compile(r"!\[.*?\]\((.*?)\)")

_TAG_BOUNDARY = r"(?:[\s,.!?]|$)"


def extract_tags(text: str) -> List[str]:
    """Return every candidate tag token in order, without the ``#`` prefix."""

    return TAG_PATTERN.findall(text)


def is_valid_tag(token: str) -> bool:
    return bool(token) and INVALID_TAG_PATTERN.search(token) is None


def valid_tags(text: str) -> List[str]:
    """Extract tags and drop media-link shorthands and URL fragments."""

    return [token for token in extract_tags(text) if is_valid_tag(token)]


def tag_match_pattern(tag: str) -> re.Pattern:
    """Compile the boundary-aware pattern used to confirm a tag in content."""

    return re.compile("#" + re.escape(tag) + _TAG_BOUNDARY)


def matches_tag(text: str, tag: str) -> bool:
    """Return True when ``#tag`` appears as a whole tag in ``text``.

    The tag must be followed by whitespace, one of ``,.!?`` or the end of the
    string, so ``#category`` and ``#cat#category`` do not match ``cat`` while
    ``#cat, hello`` does.
    """

    if not tag:
        return False
    return tag_match_pattern(tag).search(text) is not None


def extract_image_urls(text: str) -> List[str]:
    """Return the URL of each markdown ``![alt](url)`` span, in order."""

    return IMAGE_PATTERN.findall(text)
