"""Flat-file credential backend (``~/.claude/.credentials.json``)."""

import asyncio
from pathlib import Path

from ...config import CREDENTIALS_FILE
from ..base import CredentialBackend, CredentialBackendError
from ..models import Credentials


class FileCredentialBackend(CredentialBackend):
    """Stores credentials as JSON in a per-user file.

    The path matches the Claude Code CLI so both tools share a login.
    """

    def __init__(self, path: str | Path | None = None):
        self._path = Path(path) if path is not None else CREDENTIALS_FILE

    @property
    def name(self) -> str:
        return "file"

    @property
    def path(self) -> Path:
        return self._path

    def is_available(self) -> bool:
        return True

    async def load(self) -> Credentials | None:
        if not self._path.exists():
            return None
        try:
            raw = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except OSError as e:
            raise CredentialBackendError(self.name, str(e)) from e
        return Credentials.from_storage(raw)

    async def save(self, credentials: Credentials) -> None:
        await asyncio.to_thread(self._write, credentials.to_storage())

    def _write(self, payload: str) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(payload, encoding="utf-8")
            self._path.chmod(0o600)
        except OSError as e:
            raise CredentialBackendError(self.name, str(e)) from e

    async def delete(self) -> None:
        try:
            await asyncio.to_thread(self._path.unlink, missing_ok=True)
        except OSError as e:
            raise CredentialBackendError(self.name, str(e)) from e
