"""Abstract base class for credential storage backends.

This module defines the interface for credential storage.
The abstraction hides:
- Storage location (secret store, OS keychain, flat file)
- Platform availability checks
- Serialization of the credentials document
"""

from abc import ABC, abstractmethod

from ..errors import AuthError
from .models import Credentials


class CredentialBackendError(AuthError):
    """A backend failed to read, write or delete credentials."""

    def __init__(self, backend: str, message: str):
        super().__init__(f"{backend} backend: {message}")
        self.backend = backend


class CredentialBackend(ABC):
    """Abstract credential backend.

    Every backend exposes the same load/save/delete capability so that the
    credential store can try them in order without platform branching.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the backend identifier."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the backend can be used on this platform."""

    @abstractmethod
    async def load(self) -> Credentials | None:
        """Load credentials.

        Returns:
            Credentials, or None if the backend holds none

        Raises:
            CredentialBackendError: If the backend itself fails
            ValueError: If the stored document is malformed
        """

    @abstractmethod
    async def save(self, credentials: Credentials) -> None:
        """Persist credentials, replacing any previous value."""

    @abstractmethod
    async def delete(self) -> None:
        """Remove stored credentials. Missing entries are not an error."""
