"""Tag frequency aggregation (core domain)."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Mapping

from core.content_parser import valid_tags
from core.models import Message, TagCount


def count_tags(messages: Iterable[Message]) -> dict[str, int]:
    """Count valid tags across visible messages.

    Counting is per occurrence: a tag repeated inside one message counts once
    per repetition. Private messages are skipped even if the caller passes them.
    The result carries no ordering guarantee.
    """

    counter: Counter[str] = Counter()
    for message in messages:
        if message.private:
            continue
        counter.update(valid_tags(message.content))
    return dict(counter)


def to_tag_counts(table: Mapping[str, int]) -> List[TagCount]:
    """Presentation order: most used first, ties broken by name."""

    ordered = sorted(table.items(), key=lambda item: (-item[1], item[0]))
    return [TagCount(name=name, count=count) for name, count in ordered]
