"""Token fields written back after a successful refresh."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, kw_only=True)
class CredentialTokenUpdate:
    """New encrypted token state for one credential.

    Attributes:
        access_token_cipher: Encrypted new access token.
        refresh_token_cipher: Encrypted refresh token (rotated or carried over).
        expires_at: New expiry (None = does not expire / unknown).
        quota_used_bytes: Storage usage reported with the refresh, if any.
        quota_total_bytes: Storage allocation reported with the refresh, if any.
    """

    access_token_cipher: str
    refresh_token_cipher: str | None
    expires_at: datetime | None
    quota_used_bytes: int | None = None
    quota_total_bytes: int | None = None
