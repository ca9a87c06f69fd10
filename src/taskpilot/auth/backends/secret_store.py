"""Platform secret store backend built on ``keyring``.

keyring picks the best backend available (macOS Keychain, Windows Credential
Locker, Secret Service on Linux).
"""

import asyncio

import keyring
from keyring.backends.fail import Keyring as FailKeyring
from keyring.errors import KeyringError, PasswordDeleteError

from ...config import SECRET_STORE_KEY, SECRET_STORE_SERVICE
from ..base import CredentialBackend, CredentialBackendError
from ..models import Credentials


class SecretStoreCredentialBackend(CredentialBackend):
    """Stores the credentials document under a fixed key in the secret store."""

    def __init__(self, service: str = SECRET_STORE_SERVICE, key: str = SECRET_STORE_KEY):
        self._service = service
        self._key = key

    @property
    def name(self) -> str:
        return "secret-store"

    def is_available(self) -> bool:
        return not isinstance(keyring.get_keyring(), FailKeyring)

    async def load(self) -> Credentials | None:
        try:
            stored = await asyncio.to_thread(keyring.get_password, self._service, self._key)
        except KeyringError as e:
            raise CredentialBackendError(self.name, str(e)) from e
        if not stored:
            return None
        return Credentials.from_storage(stored)

    async def save(self, credentials: Credentials) -> None:
        try:
            await asyncio.to_thread(
                keyring.set_password, self._service, self._key, credentials.to_storage()
            )
        except KeyringError as e:
            raise CredentialBackendError(self.name, str(e)) from e

    async def delete(self) -> None:
        try:
            await asyncio.to_thread(keyring.delete_password, self._service, self._key)
        except PasswordDeleteError:
            pass  # Nothing stored
        except KeyringError as e:
            raise CredentialBackendError(self.name, str(e)) from e
