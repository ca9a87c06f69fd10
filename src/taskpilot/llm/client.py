"""Claude model client authenticated with OAuth credentials.

Uses the official Anthropic Python SDK as the transport, with a bearer access
token instead of an API key.
Reference: https://github.com/anthropics/anthropic-sdk-python
"""

from collections.abc import AsyncIterator
from typing import Any

import httpx
from anthropic import APIConnectionError, APIStatusError, AsyncAnthropic

from ..auth.store import CredentialStore
from ..config import API_BASE_URL, API_VERSION, DEFAULT_MAX_TOKENS, DEFAULT_MODEL
from ..errors import ApiError
from .base import LLMProvider
from .models import ChatMessage, StreamingResponse
from .streaming import iter_text_deltas


def _api_error(error: APIStatusError) -> ApiError:
    response = error.response
    return ApiError(response.status_code, response.reason_phrase, response.text)


class ClaudeClient(LLMProvider):
    """Claude client for the Messages endpoint.

    Hidden design decisions:
    - SDK client construction per access token
    - Token expiry gate before every request
    - Raw SSE frame handling for streamed replies
    - Error translation (no retries, no implicit refresh)
    """

    def __init__(
        self,
        store: CredentialStore,
        model: str = DEFAULT_MODEL,
        base_url: str = API_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        debug_callback: Any | None = None
    ):
        """Initialize the client.

        Args:
            store: Credential store providing the access token
            model: Model to request
            base_url: API base URL
            http_client: Optional preconfigured httpx client (used by tests)
            debug_callback: Optional callable(level, component, message)
        """
        self._store = store
        self._model = model
        self._base_url = base_url
        self._http_client = http_client
        self._debug_callback = debug_callback
        self._client: AsyncAnthropic | None = None
        self._client_token: str | None = None

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    async def _authorized_client(self) -> AsyncAnthropic:
        """Return an SDK client for the current, unexpired access token.

        Raises:
            NotAuthenticatedError: If no credentials are stored
            TokenExpiredError: If the access token has expired
        """
        credentials = await self._store.require_valid()

        if self._client is None or self._client_token != credentials.access_token:
            # A caller-supplied httpx client outlives token changes
            if self._client is not None and self._http_client is None:
                await self._client.close()
            self._client = AsyncAnthropic(
                auth_token=credentials.access_token,
                base_url=self._base_url,
                max_retries=0,
                default_headers={"anthropic-version": API_VERSION},
                http_client=self._http_client,
            )
            # The SDK falls back to ANTHROPIC_API_KEY; only the bearer token may be sent
            self._client.api_key = None
            self._client_token = credentials.access_token
        return self._client

    def _request_params(self, messages: list[ChatMessage], max_tokens: int) -> dict[str, Any]:
        return {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }

    async def complete(
        self,
        messages: list[ChatMessage],
        max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> str:
        client = await self._authorized_client()
        self._debug("debug", "llm", f"POST /v1/messages ({len(messages)} messages, max_tokens={max_tokens})")

        try:
            response = await client.messages.create(**self._request_params(messages, max_tokens))
        except APIStatusError as e:
            raise _api_error(e) from e
        except APIConnectionError as e:
            raise ApiError(0, "Connection error", str(e)) from e

        # Extract content (handle multiple content blocks)
        content = ""
        for block in response.content:
            if hasattr(block, "text"):
                content += block.text
        return content

    async def stream(
        self,
        messages: list[ChatMessage],
        max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> StreamingResponse:
        client = await self._authorized_client()
        self._debug("debug", "llm", f"POST /v1/messages stream ({len(messages)} messages)")
        return StreamingResponse(
            self._stream_generator(client, self._request_params(messages, max_tokens))
        )

    async def _stream_generator(
        self,
        client: AsyncAnthropic,
        request_params: dict[str, Any],
    ) -> AsyncIterator[str]:
        """Internal generator reading raw SSE lines off the HTTP response."""
        try:
            async with client.messages.with_streaming_response.create(
                **request_params, stream=True
            ) as response:
                async for text in iter_text_deltas(response.iter_lines()):
                    yield text
        except APIStatusError as e:
            raise _api_error(e) from e
        except APIConnectionError as e:
            raise ApiError(0, "Connection error", str(e)) from e

    async def close(self) -> None:
        """Close the SDK client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._client_token = None
