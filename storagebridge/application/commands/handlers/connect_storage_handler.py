"""ConnectStorage command handler.

Consumes the one-time OAuth state, exchanges the authorization code and
persists the encrypted credential.

Reconnecting the same provider account reuses the existing credential
record (tokens and profile are overwritten) instead of creating a
duplicate. A reconnect without a new refresh token keeps the stored one.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from uuid_extensions import uuid7

from storagebridge.application.commands.storage_commands import ConnectStorage
from storagebridge.core.errors import DomainError
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.entities import StorageCredential
from storagebridge.domain.enums import HealthStatus
from storagebridge.domain.protocols.encryption_protocol import EncryptionProtocol
from storagebridge.domain.protocols.logger_protocol import LoggerProtocol
from storagebridge.domain.protocols.storage_credential_repository import (
    StorageCredentialRepository,
)
from storagebridge.domain.protocols.storage_provider_protocol import (
    StorageProviderLookup,
)
from storagebridge.infrastructure.cache import OAuthStateCache


class ConnectStorageHandler:
    """Handler for ConnectStorage command.

    Dependencies (injected via constructor):
        - StorageProviderLookup: Adapter for the provider
        - OAuthStateCache: One-time state lookup
        - EncryptionProtocol: Token encryption
        - StorageCredentialRepository: Persistence
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        providers: StorageProviderLookup,
        state_cache: OAuthStateCache,
        encryption: EncryptionProtocol,
        credential_repo: StorageCredentialRepository,
        logger: LoggerProtocol,
    ) -> None:
        self._providers = providers
        self._state_cache = state_cache
        self._encryption = encryption
        self._credential_repo = credential_repo
        self._logger = logger

    async def handle(
        self, cmd: ConnectStorage
    ) -> Result[StorageCredential, DomainError]:
        """Handle ConnectStorage command.

        Returns:
            Success(StorageCredential): Stored credential.
            Failure(OAuthStateNotFoundError): State unknown, expired or reused.
            Failure(ProviderNotFoundError): Unknown provider.
            Failure(ProviderError): Code exchange failed.
            Failure(EncryptionError): Token encryption failed.
        """
        adapter_result = self._providers.get(cmd.provider_slug)
        if isinstance(adapter_result, Failure):
            return adapter_result
        adapter = adapter_result.value

        owner_result = await self._state_cache.take_once(cmd.state)
        if isinstance(owner_result, Failure):
            self._logger.warning(
                "storage_connect_state_rejected", provider=cmd.provider_slug
            )
            return owner_result
        owner_user_id = UUID(owner_result.value)

        auth_result = await adapter.exchange_code(cmd.code)
        if isinstance(auth_result, Failure):
            self._logger.warning(
                "storage_connect_exchange_failed",
                provider=cmd.provider_slug,
                owner_user_id=str(owner_user_id),
                error_code=auth_result.error.code.value,
            )
            return auth_result
        auth = auth_result.value

        access_cipher = self._encryption.encrypt(auth.access_token)
        if isinstance(access_cipher, Failure):
            return access_cipher

        now = datetime.now(UTC)
        existing = await self._find_existing(
            owner_user_id, cmd.provider_slug, auth.external_account_id
        )

        # Providers omit the refresh token on repeat consent; keep the stored one.
        refresh_cipher = existing.refresh_token_cipher if existing else None
        if auth.refresh_token:
            encrypted = self._encryption.encrypt(auth.refresh_token)
            if isinstance(encrypted, Failure):
                return encrypted
            refresh_cipher = encrypted.value

        credential = StorageCredential(
            id=existing.id if existing else uuid7(),
            owner_user_id=owner_user_id,
            provider_slug=cmd.provider_slug,
            access_token_cipher=access_cipher.value,
            refresh_token_cipher=refresh_cipher,
            expires_at=now + timedelta(seconds=auth.expires_in)
            if auth.expires_in
            else None,
            health_status=HealthStatus.HEALTHY,
            external_account_id=auth.external_account_id,
            display_name=auth.display_name,
            email=auth.email,
            picture_url=auth.picture_url,
            quota_used_bytes=auth.quota.used_bytes if auth.quota else None,
            quota_total_bytes=auth.quota.total_bytes if auth.quota else None,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        await self._credential_repo.save(credential)

        self._logger.info(
            "storage_connect_succeeded",
            provider=cmd.provider_slug,
            owner_user_id=str(owner_user_id),
            credential_id=str(credential.id),
            reconnected=existing is not None,
        )
        return Success(value=credential)

    async def _find_existing(
        self, owner_user_id: UUID, provider_slug: str, external_account_id: str
    ) -> StorageCredential | None:
        if not external_account_id:
            return None
        for credential in await self._credential_repo.list_for_owner(owner_user_id):
            if (
                credential.provider_slug == provider_slug
                and credential.external_account_id == external_account_id
            ):
                return credential
        return None
