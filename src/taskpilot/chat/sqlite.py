"""SQLite chat store.

Provides persistent chat storage using a SQLite database file.
Uses aiosqlite for async access.
"""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite
from pydantic import TypeAdapter

from ..config import DEFAULT_CHAT_DB
from .base import ChatStore
from .models import ChatState, Conversation

CURRENT_KEY = "currentConversation"
HISTORY_KEY = "conversationHistory"

_history_adapter = TypeAdapter(list[Conversation])


class SQLiteChatStore(ChatStore):
    """SQLite-backed chat store.

    State lives in a small key/value table: one row for the current
    conversation and one for the history list. Each save is a single
    transaction.
    """

    def __init__(self, path: str | Path = DEFAULT_CHAT_DB):
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS chat_state (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("SQLiteChatStore is not connected; call connect() first")
        return self._connection

    async def _get(self, key: str) -> str | None:
        conn = self._require_connection()
        async with conn.execute("SELECT value FROM chat_state WHERE key = ?", (key,)) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else None

    async def _put(self, key: str, value: str) -> None:
        await self._require_connection().execute("""
            INSERT INTO chat_state (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
        """, (key, value, datetime.now(timezone.utc).isoformat()))

    async def load_state(self) -> ChatState:
        current_json = await self._get(CURRENT_KEY)
        history_json = await self._get(HISTORY_KEY)

        current = (
            Conversation.model_validate_json(current_json) if current_json else Conversation()
        )
        history = _history_adapter.validate_json(history_json) if history_json else []
        return ChatState(current=current, history=history)

    async def save_current(self, conversation: Conversation) -> None:
        await self._put(CURRENT_KEY, conversation.model_dump_json())
        await self._require_connection().commit()

    async def save_state(self, state: ChatState) -> None:
        await self._put(CURRENT_KEY, state.current.model_dump_json())
        await self._put(HISTORY_KEY, _history_adapter.dump_json(state.history).decode())
        await self._require_connection().commit()

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
