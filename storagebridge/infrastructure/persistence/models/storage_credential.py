"""Storage credential database model.

Security:
    - access_token_cipher / refresh_token_cipher: AES-256-GCM ciphertext
      (url-safe base64 text); plaintext tokens are never stored
    - expires_at: Access token expiry, drives the refresh decision
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Index,
    String,
    Text,
    Uuid,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column

from storagebridge.infrastructure.persistence.base import BaseMutableModel


class StorageCredentialModel(BaseMutableModel):
    """Connected cloud drive account.

    Fields:
        id / created_at / updated_at: From BaseMutableModel
        owner_user_id: Owning user (users live in another service; no FK)
        provider_slug: Provider registry key ("google-drive", "dropbox")
        access_token_cipher: Encrypted access token
        refresh_token_cipher: Encrypted refresh token (nullable)
        expires_at: Access token expiry (nullable = no expiry / unknown)
        disabled: Manually disabled
        health_status: healthy | degraded | needs_reauth
        external_account_id, display_name, email, picture_url: Account profile
        quota_used_bytes, quota_total_bytes: Last reported storage usage
        deleted_at: Soft-delete marker

    Indexes:
        - ix_storage_credentials_owner_user_id: owner lookups
        - idx_storage_credentials_owner_live: (owner_user_id, deleted_at)
    """

    __tablename__ = "storage_credentials"

    owner_user_id: Mapped[UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
        comment="User who owns this credential",
    )

    provider_slug: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Provider registry key",
    )

    access_token_cipher: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token_cipher: Mapped[str | None] = mapped_column(Text, nullable=True)

    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    disabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    health_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="healthy",
        server_default="healthy",
    )

    external_account_id: Mapped[str] = mapped_column(
        String(255), nullable=False, default="", server_default=""
    )
    display_name: Mapped[str] = mapped_column(
        String(255), nullable=False, default="", server_default=""
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, default="", server_default=""
    )
    picture_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    quota_used_bytes: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    quota_total_bytes: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("idx_storage_credentials_owner_live", "owner_user_id", "deleted_at"),
    )
