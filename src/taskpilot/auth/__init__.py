"""Credential storage and interactive login."""

from .base import CredentialBackend, CredentialBackendError
from .factory import create_credential_backend, create_credential_store
from .models import Credentials
from .oauth import CallbackListener, LoginFlow, build_authorize_url
from .store import CredentialStore

__all__ = [
    "CallbackListener",
    "CredentialBackend",
    "CredentialBackendError",
    "CredentialStore",
    "Credentials",
    "LoginFlow",
    "build_authorize_url",
    "create_credential_backend",
    "create_credential_store",
]
