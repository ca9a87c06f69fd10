from .base import LLMProvider
from .client import ClaudeClient
from .models import ChatMessage, StreamingResponse
from .streaming import iter_text_deltas

__all__ = [
    "LLMProvider",
    "ClaudeClient",
    "ChatMessage",
    "StreamingResponse",
    "iter_text_deltas",
]
