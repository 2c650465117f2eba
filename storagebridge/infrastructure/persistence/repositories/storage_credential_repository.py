"""StorageCredentialRepository - SQLAlchemy implementation.

Adapter for hexagonal architecture.
Maps between domain StorageCredential entities and StorageCredentialModel.

Soft-deleted rows are invisible to every read; nothing here hard-deletes.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storagebridge.domain.entities import StorageCredential
from storagebridge.domain.enums import HealthStatus
from storagebridge.domain.value_objects import CredentialTokenUpdate
from storagebridge.infrastructure.persistence.models import StorageCredentialModel


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; stored values are always UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class StorageCredentialRepository:
    """SQLAlchemy implementation of StorageCredentialRepository protocol.

    This class does NOT inherit from the protocol (Protocol uses structural typing).

    Attributes:
        session: SQLAlchemy async session for database operations.

    Example:
        >>> async with database.get_session() as session:
        ...     repo = StorageCredentialRepository(session)
        ...     credential = await repo.find_for_owner(credential_id, user_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, credential_id: UUID) -> StorageCredential | None:
        stmt = select(StorageCredentialModel).where(
            StorageCredentialModel.id == credential_id,
            StorageCredentialModel.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_domain(model)

    async def find_for_owner(
        self, credential_id: UUID, owner_user_id: UUID
    ) -> StorageCredential | None:
        """Find a live credential by id, scoped to its owner.

        Returns None when the credential belongs to another user.
        """
        stmt = select(StorageCredentialModel).where(
            StorageCredentialModel.id == credential_id,
            StorageCredentialModel.owner_user_id == owner_user_id,
            StorageCredentialModel.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_domain(model)

    async def list_for_owner(self, owner_user_id: UUID) -> list[StorageCredential]:
        stmt = (
            select(StorageCredentialModel)
            .where(
                StorageCredentialModel.owner_user_id == owner_user_id,
                StorageCredentialModel.deleted_at.is_(None),
            )
            .order_by(StorageCredentialModel.created_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def save(self, credential: StorageCredential) -> None:
        """Create or update credential in database (merge semantics)."""
        existing = await self.session.get(StorageCredentialModel, credential.id)

        if existing is None:
            self.session.add(self._to_model(credential))
        else:
            existing.owner_user_id = credential.owner_user_id
            existing.provider_slug = credential.provider_slug
            existing.access_token_cipher = credential.access_token_cipher
            existing.refresh_token_cipher = credential.refresh_token_cipher
            existing.expires_at = credential.expires_at
            existing.disabled = credential.disabled
            existing.health_status = credential.health_status.value
            existing.external_account_id = credential.external_account_id
            existing.display_name = credential.display_name
            existing.email = credential.email
            existing.picture_url = credential.picture_url
            existing.quota_used_bytes = credential.quota_used_bytes
            existing.quota_total_bytes = credential.quota_total_bytes
            existing.deleted_at = credential.deleted_at
            existing.updated_at = datetime.now(UTC)

        await self.session.commit()

    async def update_tokens(
        self, credential_id: UUID, token_update: CredentialTokenUpdate
    ) -> None:
        """Write refreshed tokens and expiry; marks the credential healthy.

        Quota columns are only touched when the update carries them.
        """
        values: dict[str, object] = {
            "access_token_cipher": token_update.access_token_cipher,
            "refresh_token_cipher": token_update.refresh_token_cipher,
            "expires_at": token_update.expires_at,
            "health_status": HealthStatus.HEALTHY.value,
            "updated_at": datetime.now(UTC),
        }
        if token_update.quota_used_bytes is not None:
            values["quota_used_bytes"] = token_update.quota_used_bytes
        if token_update.quota_total_bytes is not None:
            values["quota_total_bytes"] = token_update.quota_total_bytes

        stmt = (
            update(StorageCredentialModel)
            .where(
                StorageCredentialModel.id == credential_id,
                StorageCredentialModel.deleted_at.is_(None),
            )
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def set_health_status(
        self, credential_id: UUID, health_status: HealthStatus
    ) -> None:
        stmt = (
            update(StorageCredentialModel)
            .where(
                StorageCredentialModel.id == credential_id,
                StorageCredentialModel.deleted_at.is_(None),
            )
            .values(health_status=health_status.value, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def soft_delete(self, credential_id: UUID, deleted_at: datetime) -> bool:
        stmt = (
            update(StorageCredentialModel)
            .where(
                StorageCredentialModel.id == credential_id,
                StorageCredentialModel.deleted_at.is_(None),
            )
            .values(deleted_at=deleted_at, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return bool(result.rowcount)

    def _to_domain(self, model: StorageCredentialModel) -> StorageCredential:
        return StorageCredential(
            id=model.id,
            owner_user_id=model.owner_user_id,
            provider_slug=model.provider_slug,
            access_token_cipher=model.access_token_cipher,
            refresh_token_cipher=model.refresh_token_cipher,
            expires_at=_as_utc(model.expires_at),
            disabled=model.disabled,
            health_status=HealthStatus(model.health_status),
            external_account_id=model.external_account_id,
            display_name=model.display_name,
            email=model.email,
            picture_url=model.picture_url,
            quota_used_bytes=model.quota_used_bytes,
            quota_total_bytes=model.quota_total_bytes,
            deleted_at=_as_utc(model.deleted_at),
            created_at=_as_utc(model.created_at) or datetime.now(UTC),
            updated_at=_as_utc(model.updated_at) or datetime.now(UTC),
        )

    def _to_model(self, entity: StorageCredential) -> StorageCredentialModel:
        return StorageCredentialModel(
            id=entity.id,
            owner_user_id=entity.owner_user_id,
            provider_slug=entity.provider_slug,
            access_token_cipher=entity.access_token_cipher,
            refresh_token_cipher=entity.refresh_token_cipher,
            expires_at=entity.expires_at,
            disabled=entity.disabled,
            health_status=entity.health_status.value,
            external_account_id=entity.external_account_id,
            display_name=entity.display_name,
            email=entity.email,
            picture_url=entity.picture_url,
            quota_used_bytes=entity.quota_used_bytes,
            quota_total_bytes=entity.quota_total_bytes,
            deleted_at=entity.deleted_at,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
