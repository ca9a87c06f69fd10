from .file import FileCredentialBackend
from .keychain import KeychainCredentialBackend
from .secret_store import SecretStoreCredentialBackend

__all__ = [
    "FileCredentialBackend",
    "KeychainCredentialBackend",
    "SecretStoreCredentialBackend",
]
