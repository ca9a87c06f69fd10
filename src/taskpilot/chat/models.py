"""Data models for chat conversations.

These models define the structure of conversations and the persisted chat
state, independent of the storage backend used.
"""

from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..config import NEW_CHAT_TITLE, TITLE_MAX_LENGTH
from ..llm.models import ChatMessage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def derive_title(content: str, limit: int = TITLE_MAX_LENGTH) -> str:
    """Conversation title from the first user message."""
    return content[:limit] + ("..." if len(content) > limit else "")


class Message(BaseModel):
    """A single chat message. Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(description="Role of the message sender")
    content: str = Field(description="Content of the message")
    timestamp: datetime = Field(default_factory=_utcnow)


class Conversation(BaseModel):
    """An ordered, append-only sequence of messages with a derived title."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    messages: list[Message] = Field(default_factory=list)
    title: str = Field(default=NEW_CHAT_TITLE)
    created_at: datetime = Field(default_factory=_utcnow)

    def append(self, role: Literal["user", "assistant"], content: str) -> Message:
        """Append a message to the conversation.

        The title is derived from the first user message and never changes
        afterwards.

        Args:
            role: Message role
            content: Message text

        Returns:
            The appended message
        """
        is_first_user_message = role == "user" and not any(
            m.role == "user" for m in self.messages
        )
        message = Message(role=role, content=content)
        self.messages.append(message)
        if is_first_user_message:
            self.title = derive_title(content)
        return message

    def to_chat_messages(self) -> list[ChatMessage]:
        """Convert to the message list sent to the model."""
        return [ChatMessage(role=m.role, content=m.content) for m in self.messages]


class ChatState(BaseModel):
    """Complete persisted chat state.

    Attributes:
        current: The live conversation
        history: Archived conversations, most recent first
    """

    current: Conversation = Field(default_factory=Conversation)
    history: list[Conversation] = Field(default_factory=list)
