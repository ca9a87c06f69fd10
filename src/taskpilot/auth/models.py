"""Data models for OAuth credentials.

The on-disk format is shared with the Claude Code CLI:
``{"claudeAiOauth": {"accessToken", "refreshToken", "expiresAt", "scopes"}}``
with ``expiresAt`` in epoch milliseconds.
"""

import time

from pydantic import BaseModel, ConfigDict, Field

from ..config import DEFAULT_SCOPES


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class Credentials(BaseModel):
    """OAuth credentials for the model API.

    Either every required field is present or validation fails; a partially
    populated record cannot be constructed.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access_token: str = Field(alias="accessToken", min_length=1, description="Bearer access token")
    refresh_token: str = Field(alias="refreshToken", min_length=1, description="OAuth refresh token")
    expires_at: int = Field(alias="expiresAt", description="Expiry time in epoch milliseconds")
    scopes: list[str] = Field(default_factory=lambda: list(DEFAULT_SCOPES))

    def is_expired(self, at_ms: int | None = None) -> bool:
        """Check whether the access token is expired.

        Args:
            at_ms: Reference time in epoch ms (defaults to now)

        Returns:
            True once the reference time reaches ``expires_at``
        """
        reference = now_ms() if at_ms is None else at_ms
        return reference >= self.expires_at

    @classmethod
    def from_expires_in(
        cls,
        access_token: str,
        refresh_token: str,
        expires_in: int,
        scopes: list[str] | None = None
    ) -> "Credentials":
        """Build credentials from a relative ``expires_in`` (seconds)."""
        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=now_ms() + expires_in * 1000,
            scopes=scopes if scopes is not None else list(DEFAULT_SCOPES),
        )

    def to_storage(self) -> str:
        """Serialize to the shared ``claudeAiOauth`` JSON document."""
        return StoredCredentials(claude_ai_oauth=self).model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_storage(cls, raw: str) -> "Credentials":
        """Parse the shared ``claudeAiOauth`` JSON document.

        Raises:
            ValueError: If the document is not valid JSON or misses fields
        """
        return StoredCredentials.model_validate_json(raw).claude_ai_oauth


class StoredCredentials(BaseModel):
    """Wrapper document persisted by every credential backend."""

    model_config = ConfigDict(populate_by_name=True)

    claude_ai_oauth: Credentials = Field(alias="claudeAiOauth")
