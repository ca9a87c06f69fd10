"""Chat session module for taskpilot.

Provides persistent conversations for the interactive chat mode.
"""

from .base import ChatStore
from .factory import create_chat_store
from .models import ChatState, Conversation, Message, derive_title
from .session import ChatSession

__all__ = [
    "ChatSession",
    "ChatState",
    "ChatStore",
    "Conversation",
    "Message",
    "create_chat_store",
    "derive_title",
]
