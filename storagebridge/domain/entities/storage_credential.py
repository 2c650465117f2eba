"""Storage credential domain entity.

Durable record for one connected cloud drive account. Token material is
held only as ciphertext; plaintext exists transiently inside the token
lifecycle manager.

Architecture:
    - Pure domain entity (no infrastructure dependencies)
    - Mapped to/from StorageCredentialModel by the repository

Usage:
    from uuid_extensions import uuid7

    credential = StorageCredential(
        id=uuid7(),
        owner_user_id=user_id,
        provider_slug="dropbox",
        access_token_cipher=cipher,
    )
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from storagebridge.domain.enums import HealthStatus


@dataclass
class StorageCredential:
    """Connection between a user and a cloud storage provider.

    Invariant:
        A credential whose refresh token cipher is empty and whose
        ``expires_at`` has passed can never produce an access token again;
        the user must reconnect.

    Attributes:
        id: Unique credential identifier.
        owner_user_id: Owning user's ID.
        provider_slug: Registry key of the provider adapter.
        access_token_cipher: Encrypted access token.
        refresh_token_cipher: Encrypted refresh token ("" or None when absent).
        expires_at: Access token expiry (None = does not expire / unknown).
        disabled: Manually disabled by the user or an operator.
        health_status: Last known health.
        external_account_id: Provider-side account id.
        display_name: Provider account display name.
        email: Provider account email.
        picture_url: Provider account avatar.
        quota_used_bytes: Last reported storage usage.
        quota_total_bytes: Last reported storage allocation.
        deleted_at: Soft-delete marker; deleted credentials are never resolved.
    """

    id: UUID
    owner_user_id: UUID
    provider_slug: str
    access_token_cipher: str
    refresh_token_cipher: str | None = None
    expires_at: datetime | None = None
    disabled: bool = False
    health_status: HealthStatus = HealthStatus.HEALTHY
    external_account_id: str = ""
    display_name: str = ""
    email: str = ""
    picture_url: str | None = None
    quota_used_bytes: int | None = None
    quota_total_bytes: int | None = None
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate credential after initialization.

        Raises:
            ValueError: If required fields are invalid.
        """
        if not self.provider_slug or len(self.provider_slug) > 50:
            raise ValueError("provider_slug must be 1-50 characters")

    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_usable(self) -> bool:
        """Whether the credential may be resolved at all."""
        return not self.disabled and not self.is_deleted()

    def has_refresh_token(self) -> bool:
        return bool(self.refresh_token_cipher)

    def is_expired(self, now: datetime) -> bool:
        """Whether the access token is expired at ``now``.

        A missing expiry means the token never expires.
        """
        if self.expires_at is None:
            return False
        return self.expires_at <= now
