"""Server-Sent-Events frame parsing for streamed replies."""

import json
from collections.abc import AsyncIterable, AsyncIterator

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def extract_text_delta(payload: str) -> str | None:
    """Extract delta text from one ``data:`` payload.

    Returns None for the sentinel, malformed JSON, and events other than a
    ``content_block_delta`` carrying text.
    """
    if payload == DONE_SENTINEL:
        return None
    try:
        event = json.loads(payload)
    except json.JSONDecodeError:
        # A single bad frame must not abort the stream
        return None
    if not isinstance(event, dict) or event.get("type") != "content_block_delta":
        return None
    delta = event.get("delta")
    if not isinstance(delta, dict):
        return None
    text = delta.get("text")
    return text if isinstance(text, str) and text else None


async def iter_text_deltas(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Turn raw response lines into text chunks.

    Args:
        lines: Response body lines. Multi-line strings are split on newlines,
            so raw body chunks work as well as pre-split lines.

    Yields:
        Text of each ``content_block_delta`` event, in arrival order
    """
    async for block in lines:
        for line in block.split("\n"):
            line = line.rstrip("\r")
            if not line.startswith(DATA_PREFIX):
                continue
            text = extract_text_delta(line[len(DATA_PREFIX):])
            if text is not None:
                yield text
