"""Ports (interfaces) used by the core.

Ports define the minimal contract for the message store so that the core can
be reused with different backends.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from core.models import Message
from core.query_filter import MessageQuery


class StoreError(Exception):
    """Raised by store adapters when messages cannot be retrieved."""


class MessageStorePort(Protocol):
    """Read operations the core needs from the message store."""

    def query_messages(self, query: MessageQuery) -> List[Message]:
        ...

    def get_message(self, message_id: int) -> Optional[Message]:
        ...
