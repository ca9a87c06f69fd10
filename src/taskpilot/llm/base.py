from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..config import DEFAULT_MAX_TOKENS
from .models import ChatMessage, StreamingResponse


class LLMProvider(ABC):
    """Abstract base class for model clients.

    This module hides the design decision of how the model API is reached.
    Implementations must handle:
    - Authentication of each request
    - Request/response format conversion
    - Mapping transport failures onto the package error taxonomy

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            text = await client.send(messages)
        # Automatically cleaned up
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> str:
        """Send messages and wait for the full reply.

        Args:
            messages: Conversation so far, oldest first
            max_tokens: Maximum tokens to generate

        Returns:
            The reply text
        """

    @abstractmethod
    async def stream(
        self,
        messages: list[ChatMessage],
        max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> StreamingResponse:
        """Send messages and stream the reply.

        Args:
            messages: Conversation so far, oldest first
            max_tokens: Maximum tokens to generate

        Returns:
            StreamingResponse that yields text chunks as they arrive
        """

    async def send(
        self,
        messages: list[ChatMessage],
        max_tokens: int = DEFAULT_MAX_TOKENS,
        streaming: bool = False,
        on_chunk: Callable[[str], Any] | None = None
    ) -> str:
        """Send messages and return the full reply text.

        Streaming is used when requested or when ``on_chunk`` is given; the
        callback runs synchronously for each chunk as it arrives. The return
        value is the full text in both modes.
        """
        if not streaming and on_chunk is None:
            return await self.complete(messages, max_tokens)

        response = await self.stream(messages, max_tokens)
        try:
            async for chunk in response:
                if on_chunk:
                    on_chunk(chunk)
        finally:
            await response.aclose()
        return response.text

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
