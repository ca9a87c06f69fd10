"""Pytest configuration and shared fixtures."""
import pytest
from fakes import MemoryCredentialBackend

from taskpilot.auth import CredentialStore, Credentials
from taskpilot.auth.models import now_ms


@pytest.fixture
def workspace(tmp_path):
    """Return an empty workspace folder."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def valid_credentials():
    """Return credentials that expire in an hour."""
    return Credentials(
        access_token="test-access-token",
        refresh_token="test-refresh-token",
        expires_at=now_ms() + 3_600_000,
    )


@pytest.fixture
def expired_credentials():
    """Return credentials that expired a minute ago."""
    return Credentials(
        access_token="old-access-token",
        refresh_token="old-refresh-token",
        expires_at=now_ms() - 60_000,
    )


@pytest.fixture
def credential_store(valid_credentials):
    """Return a store backed by one in-memory backend holding valid credentials."""
    return CredentialStore([MemoryCredentialBackend(valid_credentials)])


@pytest.fixture
def log_records():
    """Return a list that collects (level, component, message) tuples."""
    return []


@pytest.fixture
def debug_callback(log_records):
    """Return a debug callback appending to ``log_records``."""
    def _callback(level, component, message):
        log_records.append((level, component, message))
    return _callback

