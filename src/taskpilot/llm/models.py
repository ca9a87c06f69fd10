from collections.abc import AsyncIterator
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Wrapper for a streaming model response.

    Acts as an async iterator over text chunks. It is finite and can only be
    consumed once; stopping early and calling ``aclose()`` releases the
    underlying HTTP response.

    Usage:
        stream = await client.stream(messages)
        async for chunk in stream:
            print(chunk, end="")
        print(stream.text)  # Everything received so far
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        """Initialize with an async iterator of text chunks.

        Args:
            async_iter: Async iterator yielding text chunks
        """
        self._iter = async_iter
        self._parts: list[str] = []

    @property
    def text(self) -> str:
        """Concatenation of every chunk yielded so far."""
        return "".join(self._parts)

    def __aiter__(self) -> "StreamingResponse":
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> str:
        """Get next chunk from the underlying iterator."""
        chunk = await self._iter.__anext__()
        self._parts.append(chunk)
        return chunk

    async def aclose(self) -> None:
        """Stop the stream and close the underlying connection."""
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()


class ChatMessage(BaseModel):
    """A single message sent to the model."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(description="Role of the message sender")
    content: str = Field(description="Content of the message")
