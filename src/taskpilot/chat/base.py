"""Abstract base class for chat state backends.

This module defines the interface for chat persistence.
The abstraction hides:
- Storage format (JSON documents, SQLite rows)
- Persistence mechanism (file, database, in-memory)
- Connection management
"""

from abc import ABC, abstractmethod

from .models import ChatState, Conversation


class ChatStore(ABC):
    """Abstract chat store.

    Every save method completes its write before returning, so a message is
    durable once ``ChatSession.add_message`` returns.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store backend gracefully."""

    @abstractmethod
    async def load_state(self) -> ChatState:
        """Load the current conversation and history (empty state if none)."""

    @abstractmethod
    async def save_current(self, conversation: Conversation) -> None:
        """Persist the current conversation only."""

    @abstractmethod
    async def save_state(self, state: ChatState) -> None:
        """Persist current conversation and history in one write."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
