"""Store-level predicates for tag-scoped feeds (core domain).

Feed retrieval is two-phase: the store runs a cheap substring filter for
``#tag`` and the boundary-aware match from the content parser then discards
false positives such as ``#tag2`` for a request on ``tag``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from core.content_parser import tag_match_pattern
from core.models import Message


@dataclass(frozen=True)
class MessageQuery:
    """Composable message-store predicate.

    Unset fields do not filter. ``content_contains`` is a case-sensitive
    substring test and is expected to overmatch.
    """

    content_contains: Optional[str] = None
    author_id: Optional[int] = None
    username: Optional[str] = None
    public_only: bool = False
    newest_first: bool = True

    def where_author_id(self, author_id: Optional[int]) -> "MessageQuery":
        if author_id is None:
            return self
        return replace(self, author_id=author_id)

    def where_username(self, username: Optional[str]) -> "MessageQuery":
        if not username:
            return self
        return replace(self, username=username)

    def visible_only(self) -> "MessageQuery":
        return replace(self, public_only=True)


ALL_MESSAGES = MessageQuery()
VISIBLE_MESSAGES = ALL_MESSAGES.visible_only()


def build_tag_query(
    tag: Optional[str],
    author_id: Optional[int] = None,
    username: Optional[str] = None,
) -> Optional[MessageQuery]:
    """Return the coarse store query for a tag feed, or None for an empty tag."""

    if not tag or not tag.strip():
        return None
    return (
        MessageQuery(content_contains=f"#{tag}")
        .visible_only()
        .where_author_id(author_id)
        .where_username(username)
    )


def filter_tag_matches(messages: Iterable[Message], tag: str) -> List[Message]:
    """Keep only messages whose content contains ``#tag`` as a whole tag."""

    pattern = tag_match_pattern(tag)
    return [message for message in messages if pattern.search(message.content)]
