"""Credential store that chains several backends.

Hidden design decisions:
- Lookup order across backends
- Which failures are tolerated while loading and saving
- Caching of the loaded credentials
"""

from typing import Any

from ..errors import AuthError, NotAuthenticatedError, TokenExpiredError
from .base import CredentialBackend, CredentialBackendError
from .models import Credentials


class CredentialStore:
    """Ordered chain of credential backends.

    Loading returns the first valid credentials found. Saving writes to every
    available backend so other tools reading any of them see the same login.
    """

    def __init__(
        self,
        backends: list[CredentialBackend],
        debug_callback: Any | None = None
    ):
        """Initialize the store.

        Args:
            backends: Backends in lookup order
            debug_callback: Optional callable(level, component, message)
        """
        self._backends = list(backends)
        self._debug_callback = debug_callback
        self._credentials: Credentials | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for logging."""
        self._debug_callback = callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    @property
    def backends(self) -> list[CredentialBackend]:
        return list(self._backends)

    @property
    def credentials(self) -> Credentials | None:
        """Credentials from the last successful load or save."""
        return self._credentials

    def _available(self) -> list[CredentialBackend]:
        return [b for b in self._backends if b.is_available()]

    async def load(self) -> Credentials | None:
        """Load credentials from the first backend that holds a valid record.

        Expired records are skipped so they cannot hide a fresh login in a
        later backend. If nothing valid is found, the first expired record
        is returned so callers can tell "expired" from "absent".
        """
        expired: Credentials | None = None
        for backend in self._available():
            try:
                credentials = await backend.load()
            except (CredentialBackendError, ValueError) as e:
                self._debug("warning", "credentials", f"Ignoring {backend.name} credentials: {e}")
                continue
            if credentials is None:
                continue
            if credentials.is_expired():
                self._debug("debug", "credentials", f"Skipping expired credentials from {backend.name}")
                expired = expired or credentials
                continue
            self._debug("debug", "credentials", f"Loaded credentials from {backend.name}")
            self._credentials = credentials
            return credentials

        self._credentials = expired
        return expired

    async def save(self, credentials: Credentials) -> None:
        """Persist credentials through every available backend.

        Raises:
            AuthError: If no backend accepted the credentials
        """
        saved: list[str] = []
        for backend in self._available():
            try:
                await backend.save(credentials)
            except CredentialBackendError as e:
                self._debug("warning", "credentials", str(e))
                continue
            saved.append(backend.name)

        if not saved:
            raise AuthError("Failed to save credentials to any backend")

        self._debug("info", "credentials", f"Saved credentials to: {', '.join(saved)}")
        self._credentials = credentials

    async def delete(self) -> None:
        """Remove credentials from every backend (sign out)."""
        for backend in self._available():
            try:
                await backend.delete()
            except CredentialBackendError as e:
                self._debug("warning", "credentials", str(e))
        self._credentials = None

    async def require_valid(self) -> Credentials:
        """Load credentials and ensure they are usable.

        Raises:
            NotAuthenticatedError: If no backend holds credentials
            TokenExpiredError: If the stored token has expired
        """
        credentials = self._credentials
        if credentials is None or credentials.is_expired():
            # Another process may have logged in since the last load
            credentials = await self.load()
        if credentials is None:
            raise NotAuthenticatedError()
        if credentials.is_expired():
            raise TokenExpiredError()
        return credentials

    async def has_valid_credentials(self) -> bool:
        """Check for present, unexpired credentials."""
        try:
            await self.require_valid()
        except AuthError:
            return False
        return True
