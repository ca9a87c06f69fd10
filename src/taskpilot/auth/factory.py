"""Factory for creating credential backends and the default store."""

from pathlib import Path
from typing import Any

from .base import CredentialBackend
from .store import CredentialStore


def create_credential_backend(backend: str, **kwargs: Any) -> CredentialBackend:
    """Create a credential backend.

    Args:
        backend: Backend type ("secret-store", "keychain" or "file")
        **kwargs: Backend-specific configuration
            For file:
                - path: str | Path (default: ~/.claude/.credentials.json)
            For keychain:
                - service: str (default: 'Claude Code-credentials')
                - account: str | None (default: current user)
            For secret-store:
                - service: str (default: 'taskpilot')
                - key: str (default: 'claude-credentials')

    Returns:
        CredentialBackend instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "file":
        from .backends.file import FileCredentialBackend
        return FileCredentialBackend(**kwargs)

    elif backend == "keychain":
        from .backends.keychain import KeychainCredentialBackend
        return KeychainCredentialBackend(**kwargs)

    elif backend == "secret-store":
        from .backends.secret_store import SecretStoreCredentialBackend
        return SecretStoreCredentialBackend(**kwargs)

    raise ValueError(
        f"Unsupported credential backend: {backend}. "
        f"Supported backends: secret-store, keychain, file"
    )


def create_credential_store(
    credentials_file: str | Path | None = None,
    backends: list[str] | None = None,
    debug_callback: Any | None = None
) -> CredentialStore:
    """Create a credential store with the standard backend chain.

    Args:
        credentials_file: Override for the flat-file location
        backends: Backend names in lookup order
            (default: secret-store, keychain, file)
        debug_callback: Optional callable(level, component, message)

    Returns:
        CredentialStore trying each backend in order
    """
    names = backends or ["secret-store", "keychain", "file"]
    chain = []
    for name in names:
        if name == "file" and credentials_file is not None:
            chain.append(create_credential_backend("file", path=credentials_file))
        else:
            chain.append(create_credential_backend(name))
    return CredentialStore(chain, debug_callback=debug_callback)
