"""ListStorageIntegrations query handler.

Returns the user's credentials as DTOs; token ciphertext never leaves the
application layer.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from storagebridge.application.queries.storage_queries import ListStorageIntegrations
from storagebridge.core.result import Result, Success
from storagebridge.domain.entities import StorageCredential
from storagebridge.domain.protocols.storage_credential_repository import (
    StorageCredentialRepository,
)


@dataclass
class StorageIntegrationResult:
    """Storage integration DTO (no token material)."""

    id: UUID
    provider_slug: str
    display_name: str
    email: str
    picture_url: str | None
    disabled: bool
    health_status: str
    expires_at: datetime | None
    quota_used_bytes: int | None
    quota_total_bytes: int | None
    created_at: datetime

    @classmethod
    def from_entity(cls, credential: StorageCredential) -> "StorageIntegrationResult":
        return cls(
            id=credential.id,
            provider_slug=credential.provider_slug,
            display_name=credential.display_name,
            email=credential.email,
            picture_url=credential.picture_url,
            disabled=credential.disabled,
            health_status=credential.health_status.value,
            expires_at=credential.expires_at,
            quota_used_bytes=credential.quota_used_bytes,
            quota_total_bytes=credential.quota_total_bytes,
            created_at=credential.created_at,
        )


class ListStorageIntegrationsHandler:
    """Handler for ListStorageIntegrations query."""

    def __init__(self, credential_repo: StorageCredentialRepository) -> None:
        self._credential_repo = credential_repo

    async def handle(
        self, query: ListStorageIntegrations
    ) -> Result[list[StorageIntegrationResult], None]:
        """Never fails; an empty list is a valid result."""
        credentials = await self._credential_repo.list_for_owner(query.owner_user_id)
        return Success(
            value=[StorageIntegrationResult.from_entity(c) for c in credentials]
        )
