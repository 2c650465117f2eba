"""StorageCredentialRepository protocol (port).

Read/write access to durable credential records; no business logic.
Infrastructure implements this with SQLAlchemy.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from storagebridge.domain.entities import StorageCredential
from storagebridge.domain.enums import HealthStatus
from storagebridge.domain.value_objects import CredentialTokenUpdate


class StorageCredentialRepository(Protocol):
    """Storage credential persistence port."""

    async def find_by_id(self, credential_id: UUID) -> StorageCredential | None:
        """Find a non-deleted credential by id.

        Args:
            credential_id: Credential identifier.

        Returns:
            Credential if found and not soft-deleted, None otherwise.
        """
        ...

    async def find_for_owner(
        self, credential_id: UUID, owner_user_id: UUID
    ) -> StorageCredential | None:
        """Find a non-deleted credential by id AND owner.

        Returns None for credentials owned by another user, so callers
        cannot distinguish "foreign" from "absent".
        """
        ...

    async def list_for_owner(self, owner_user_id: UUID) -> list[StorageCredential]:
        """List non-deleted credentials for a user."""
        ...

    async def save(self, credential: StorageCredential) -> None:
        """Create or update a credential."""
        ...

    async def update_tokens(
        self, credential_id: UUID, token_update: CredentialTokenUpdate
    ) -> None:
        """Persist refreshed token material and expiry."""
        ...

    async def set_health_status(
        self, credential_id: UUID, health_status: HealthStatus
    ) -> None:
        """Record the last known health (tokens are left untouched)."""
        ...

    async def soft_delete(self, credential_id: UUID, deleted_at: datetime) -> bool:
        """Mark a credential deleted.

        Returns:
            True if a live credential was deleted, False if none matched.
        """
        ...
