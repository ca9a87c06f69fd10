"""Test doubles shared across test modules."""
from collections.abc import AsyncIterator

from taskpilot.auth import CredentialBackend, CredentialBackendError
from taskpilot.llm import LLMProvider, StreamingResponse


class MemoryCredentialBackend(CredentialBackend):
    """Credential backend holding one record in memory."""

    def __init__(self, credentials=None, name="memory", available=True, fail_on_save=False):
        self.stored = credentials
        self._name = name
        self._available = available
        self._fail_on_save = fail_on_save
        self.deleted = False

    @property
    def name(self) -> str:
        return self._name

    def is_available(self) -> bool:
        return self._available

    async def load(self):
        return self.stored

    async def save(self, credentials):
        if self._fail_on_save:
            raise CredentialBackendError(self._name, "read-only")
        self.stored = credentials

    async def delete(self):
        self.deleted = True
        self.stored = None


class FakeLLM(LLMProvider):
    """Model client returning a canned reply and recording each request."""

    def __init__(self, reply="", chunks=None):
        self.reply = reply
        self.chunks = chunks if chunks is not None else [reply]
        self.requests = []
        self.closed = False

    async def complete(self, messages, max_tokens=4096):
        self.requests.append(list(messages))
        return self.reply

    async def stream(self, messages, max_tokens=4096):
        self.requests.append(list(messages))

        async def _chunks() -> AsyncIterator[str]:
            for chunk in self.chunks:
                yield chunk

        return StreamingResponse(_chunks())

    async def close(self):
        self.closed = True


class FakeGit:
    """Stand-in for GitClient with a fixed status and issue."""

    def __init__(self, status=None, issue=None):
        self._status = status
        self._issue = issue

    async def status(self):
        return self._status

    async def view_issue(self, number):
        return self._issue
