"""macOS Keychain credential backend.

Talks to the ``security`` CLI directly so the entry lives under the same
service name the Claude Code CLI uses.
"""

import asyncio
import getpass
import shutil
import sys

from ...config import KEYCHAIN_SERVICE
from ..base import CredentialBackend, CredentialBackendError
from ..models import Credentials


class KeychainCredentialBackend(CredentialBackend):
    """Stores credentials as a generic password in the login keychain."""

    def __init__(self, service: str = KEYCHAIN_SERVICE, account: str | None = None):
        self._service = service
        self._account = account or getpass.getuser()

    @property
    def name(self) -> str:
        return "keychain"

    def is_available(self) -> bool:
        return sys.platform == "darwin" and shutil.which("security") is not None

    async def _security(self, *args: str) -> tuple[int, str, str]:
        try:
            process = await asyncio.create_subprocess_exec(
                "security",
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CredentialBackendError(self.name, str(e)) from e
        stdout, stderr = await process.communicate()
        return process.returncode, stdout.decode(), stderr.decode()

    async def load(self) -> Credentials | None:
        code, stdout, _ = await self._security(
            "find-generic-password", "-s", self._service, "-w"
        )
        if code != 0:
            # Entry doesn't exist
            return None
        return Credentials.from_storage(stdout.strip())

    async def save(self, credentials: Credentials) -> None:
        code, _, stderr = await self._security(
            "add-generic-password",
            "-a", self._account,
            "-s", self._service,
            "-w", credentials.to_storage(),
            "-U",
        )
        if code != 0:
            raise CredentialBackendError(self.name, stderr.strip() or f"exit code {code}")

    async def delete(self) -> None:
        # Non-zero exit means the entry was already gone
        await self._security("delete-generic-password", "-s", self._service)
