"""SQLite storage adapter.

Implements the core MessageStorePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from typing import Any, List, Optional

from core.models import Message
from core.ports import StoreError
from core.query_filter import MessageQuery


class SQLiteMessageStore:
    """Thin SQLite wrapper that satisfies the MessageStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open message store at {self._db_path}") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - messages: one row per post, read by the derived views
        """

        with closing(self._connect()) as conn, conn:
            # Fields:
            # - id: auto-increment primary key, immutable message identifier
            # - user_id: author id
            # - username: author display name at posting time
            # - content: raw markdown text, tags and inline images included
            # - image_url: optional dedicated image
            # - private: 1 hides the message from feeds and tag counts
            # - created_at: ISO-8601 UTC timestamp, immutable
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    username TEXT,
                    content TEXT NOT NULL,
                    image_url TEXT,
                    private INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_messages_created_at ON messages (created_at)"
            )

    def add_message(
        self,
        user_id: int,
        content: str,
        username: Optional[str] = None,
        image_url: Optional[str] = None,
        private: bool = False,
        created_at: Optional[datetime] = None,
    ) -> Message:
        """Insert a message and return it with its assigned id."""

        # Stored as UTC so ORDER BY on the ISO text is chronological.
        created_at = _as_utc(created_at or datetime.now(timezone.utc))
        try:
            with closing(self._connect()) as conn, conn:
                cur = conn.execute(
                    """
                    INSERT INTO messages (user_id, username, content, image_url, private, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (user_id, username, content, image_url, int(private), created_at.isoformat()),
                )
                message_id = cur.lastrowid
        except sqlite3.Error as exc:
            raise StoreError("Failed to insert message") from exc
        return Message(
            id=int(message_id),
            user_id=user_id,
            username=username,
            content=content,
            image_url=image_url,
            private=private,
            created_at=created_at,
        )

    def query_messages(self, query: MessageQuery) -> List[Message]:
        """Return messages matching every set field of ``query``."""

        clauses: List[str] = []
        params: List[Any] = []
        # instr() is a case-sensitive substring test, unlike LIKE.
        if query.content_contains:
            clauses.append("instr(content, ?) > 0")
            params.append(query.content_contains)
        if query.author_id is not None:
            clauses.append("user_id = ?")
            params.append(query.author_id)
        if query.username:
            clauses.append("username = ?")
            params.append(query.username)
        if query.public_only:
            clauses.append("private = 0")

        sql = "SELECT * FROM messages"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC, id DESC" if query.newest_first else " ORDER BY created_at, id"

        try:
            with closing(self._connect()) as conn, conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError("Failed to query messages") from exc
        return [_row_to_message(row) for row in rows]

    def get_message(self, message_id: int) -> Optional[Message]:
        """Return a single message by id, if any."""

        try:
            with closing(self._connect()) as conn, conn:
                row = conn.execute("SELECT * FROM messages WHERE id = ?", (message_id,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to load message {message_id}") from exc
        return _row_to_message(row) if row else None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _row_to_message(row: sqlite3.Row) -> Message:
    created_at = _as_utc(datetime.fromisoformat(row["created_at"]))
    return Message(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        username=row["username"],
        content=row["content"],
        image_url=row["image_url"] or None,
        private=bool(row["private"]),
        created_at=created_at,
    )
