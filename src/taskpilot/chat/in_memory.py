"""In-memory chat store.

Data is stored in memory and lost when the process exits.
"""

from .base import ChatStore
from .models import ChatState, Conversation


class InMemoryChatStore(ChatStore):
    """In-memory chat store (session-only).

    Keeps deep copies so later mutations by the caller are only visible once
    saved, the same as with a persistent backend.
    """

    def __init__(self) -> None:
        self._state = ChatState()

    async def connect(self) -> None:
        """Initialize store (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close store (no-op for in-memory)."""
        pass

    async def load_state(self) -> ChatState:
        return self._state.model_copy(deep=True)

    async def save_current(self, conversation: Conversation) -> None:
        self._state = ChatState(
            current=conversation.model_copy(deep=True),
            history=self._state.history,
        )

    async def save_state(self, state: ChatState) -> None:
        self._state = state.model_copy(deep=True)

    @property
    def backend_type(self) -> str:
        return "memory"
