"""Chat session bookkeeping.

A ChatSession owns exactly one live conversation plus a capped list of
archived ones, and writes every change through its store before returning.
"""

from collections.abc import Callable
from typing import Any, Literal

from ..config import DEFAULT_MAX_TOKENS, HISTORY_MAX_SIZE
from ..llm import LLMProvider
from .base import ChatStore
from .models import ChatState, Conversation, Message


class ChatSession:
    """The active conversation and its history.

    Usage:
        session = await ChatSession.open(store)
        reply = await session.stream_reply(client, "Hello", on_chunk=print)
        await session.start_new_conversation()
    """

    def __init__(
        self,
        store: ChatStore,
        state: ChatState | None = None,
        max_history: int = HISTORY_MAX_SIZE
    ):
        self._store = store
        self._state = state or ChatState()
        self._max_history = max_history

    @classmethod
    async def open(cls, store: ChatStore, max_history: int = HISTORY_MAX_SIZE) -> "ChatSession":
        """Restore the saved session from a connected store."""
        state = await store.load_state()
        return cls(store, state=state, max_history=max_history)

    @property
    def current(self) -> Conversation:
        return self._state.current

    def get_messages(self) -> list[Message]:
        return list(self._state.current.messages)

    def get_conversation_history(self) -> list[Conversation]:
        """Archived conversations, most recent first."""
        return list(self._state.history)

    async def add_message(self, role: Literal["user", "assistant"], content: str) -> Message:
        """Append a message to the current conversation and persist it."""
        current = self._state.current.model_copy(deep=True)
        message = current.append(role, content)
        await self._store.save_current(current)
        self._state.current = current
        return message

    def _archive_current(self, history: list[Conversation]) -> list[Conversation]:
        # Empty conversations are discarded rather than archived
        if self._state.current.messages:
            history = [self._state.current, *history]
        return history[:self._max_history]

    async def start_new_conversation(self) -> Conversation:
        """Archive the current conversation and start an empty one."""
        state = ChatState(
            current=Conversation(),
            history=self._archive_current(list(self._state.history)),
        )
        await self._store.save_state(state)
        self._state = state
        return state.current

    async def load_conversation(self, conversation_id: str) -> bool:
        """Make an archived conversation current again.

        The current conversation is archived the same way as when starting a
        new one. Unknown ids leave the session untouched.

        Returns:
            True if the conversation was found
        """
        target = next((c for c in self._state.history if c.id == conversation_id), None)
        if target is None:
            return False

        remaining = [c for c in self._state.history if c.id != conversation_id]
        state = ChatState(current=target, history=self._archive_current(remaining))
        await self._store.save_state(state)
        self._state = state
        return True

    async def clear_all_history(self) -> None:
        """Drop every archived conversation and start fresh."""
        state = ChatState()
        await self._store.save_state(state)
        self._state = state

    async def stream_reply(
        self,
        llm: LLMProvider,
        user_text: str,
        on_chunk: Callable[[str], Any] | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> str:
        """Send a user message and stream the assistant's reply.

        The user message is recorded first; the assistant message is recorded
        only once the stream completes.

        Returns:
            Full reply text
        """
        await self.add_message("user", user_text)
        reply = await llm.send(
            self._state.current.to_chat_messages(),
            max_tokens=max_tokens,
            streaming=True,
            on_chunk=on_chunk,
        )
        await self.add_message("assistant", reply)
        return reply
