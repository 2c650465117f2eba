"""Token lifecycle management for storage credentials.

Returns a usable plaintext access token for a stored credential, refreshing
and persisting new tokens when the stored one has expired.

Decision (pure, ``evaluate_token_state``):
    VALID                 expires_at is None or in the future
    EXPIRED_WITH_REFRESH  expired, refresh token present -> refresh + persist
    EXPIRED_NO_REFRESH    expired, no refresh token -> ReauthRequiredError

Concurrency:
    The refresh sequence (re-read, decide, refresh, persist) runs under a
    per-credential lock. The record is re-read under the lock so a waiter
    observes a refresh another task already completed and does not refresh
    again. The VALID fast path takes no lock and has no side effects.

Refresh failures are returned exactly as the adapter reported them. Token
fields are never written on failure; only the health status is updated
(``degraded`` for transient failures, ``needs_reauth`` otherwise).
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import Enum
from uuid import UUID

from storagebridge.application.services.credential_locks import CredentialLockRegistry
from storagebridge.core.enums import ErrorCode
from storagebridge.core.errors import DomainError
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.entities import StorageCredential
from storagebridge.domain.enums import HealthStatus
from storagebridge.domain.errors import IntegrationNotFoundError, ReauthRequiredError
from storagebridge.domain.protocols.encryption_protocol import EncryptionProtocol
from storagebridge.domain.protocols.logger_protocol import LoggerProtocol
from storagebridge.domain.protocols.storage_credential_repository import (
    StorageCredentialRepository,
)
from storagebridge.domain.protocols.storage_provider_protocol import (
    StorageProviderLookup,
)
from storagebridge.domain.value_objects import CredentialTokenUpdate


class TokenState(Enum):
    VALID = "valid"
    EXPIRED_WITH_REFRESH = "expired_with_refresh"
    EXPIRED_NO_REFRESH = "expired_no_refresh"


def evaluate_token_state(record: StorageCredential, now: datetime) -> TokenState:
    """Classify a credential's access token at ``now``."""
    if not record.is_expired(now):
        return TokenState.VALID
    if record.has_refresh_token():
        return TokenState.EXPIRED_WITH_REFRESH
    return TokenState.EXPIRED_NO_REFRESH


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TokenLifecycleManager:
    """Keeps stored credentials usable.

    Dependencies (injected via constructor):
        - StorageCredentialRepository: Reads records, persists refreshed tokens
        - EncryptionProtocol: Token ciphertext <-> plaintext
        - StorageProviderLookup: Adapter for the credential's provider
        - CredentialLockRegistry: App-scoped per-credential locks
        - LoggerProtocol: Structured logging
    """

    def __init__(
        self,
        *,
        credential_repo: StorageCredentialRepository,
        encryption: EncryptionProtocol,
        providers: StorageProviderLookup,
        locks: CredentialLockRegistry,
        logger: LoggerProtocol,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._credential_repo = credential_repo
        self._encryption = encryption
        self._providers = providers
        self._locks = locks
        self._logger = logger
        self._clock = clock

    async def get_access_token(self, credential_id: UUID) -> Result[str, DomainError]:
        """Return a valid access token for a credential id.

        Returns:
            Success(str): Plaintext access token.
            Failure(IntegrationNotFoundError): Absent, deleted or disabled.
            Failure(ReauthRequiredError): Expired with no refresh token.
            Failure(ProviderError): Refresh rejected or provider unreachable.
        """
        record = await self._credential_repo.find_by_id(credential_id)
        if record is None or not record.is_usable():
            return Failure(error=self._not_found(credential_id))
        return await self.ensure_access_token(record)

    async def ensure_access_token(
        self, record: StorageCredential
    ) -> Result[str, DomainError]:
        """Return a valid access token for an already-loaded record."""
        if evaluate_token_state(record, self._clock()) is TokenState.VALID:
            return self._encryption.decrypt(record.access_token_cipher)

        async with self._locks.hold(record.id):
            current = await self._credential_repo.find_by_id(record.id)
            if current is None:
                return Failure(error=self._not_found(record.id))

            now = self._clock()
            match evaluate_token_state(current, now):
                case TokenState.VALID:
                    self._logger.debug(
                        "storage_token_refreshed_by_other_task",
                        credential_id=str(current.id),
                    )
                    return self._encryption.decrypt(current.access_token_cipher)
                case TokenState.EXPIRED_NO_REFRESH:
                    await self._mark_health(current, HealthStatus.NEEDS_REAUTH)
                    self._logger.info(
                        "storage_token_reauth_required",
                        credential_id=str(current.id),
                        provider=current.provider_slug,
                    )
                    return Failure(
                        error=ReauthRequiredError(
                            code=ErrorCode.STORAGE_REAUTH_REQUIRED,
                            message=(
                                "Storage access expired and cannot be refreshed; "
                                "reconnect the account"
                            ),
                            credential_id=str(current.id),
                            provider_name=current.provider_slug,
                        )
                    )
                case TokenState.EXPIRED_WITH_REFRESH:
                    return await self._refresh(current, now)

    async def _refresh(
        self, record: StorageCredential, now: datetime
    ) -> Result[str, DomainError]:
        adapter_result = self._providers.get(record.provider_slug)
        if isinstance(adapter_result, Failure):
            return adapter_result
        adapter = adapter_result.value

        refresh_result = self._encryption.decrypt(record.refresh_token_cipher or "")
        if isinstance(refresh_result, Failure):
            return refresh_result
        old_refresh_token = refresh_result.value

        self._logger.info(
            "storage_token_refresh_started",
            credential_id=str(record.id),
            provider=record.provider_slug,
        )
        auth_result = await adapter.refresh(old_refresh_token)
        if isinstance(auth_result, Failure):
            self._logger.warning(
                "storage_token_refresh_failed",
                credential_id=str(record.id),
                provider=record.provider_slug,
                error_code=auth_result.error.code.value,
            )
            await self._mark_health(
                record,
                HealthStatus.DEGRADED
                if auth_result.error.is_retryable
                else HealthStatus.NEEDS_REAUTH,
            )
            return auth_result
        auth = auth_result.value

        access_cipher = self._encryption.encrypt(auth.access_token)
        if isinstance(access_cipher, Failure):
            return access_cipher
        refresh_cipher = self._encryption.encrypt(auth.refresh_token or old_refresh_token)
        if isinstance(refresh_cipher, Failure):
            return refresh_cipher

        expires_at = (
            now + timedelta(seconds=auth.expires_in) if auth.expires_in else None
        )
        await self._credential_repo.update_tokens(
            record.id,
            CredentialTokenUpdate(
                access_token_cipher=access_cipher.value,
                refresh_token_cipher=refresh_cipher.value,
                expires_at=expires_at,
                quota_used_bytes=auth.quota.used_bytes if auth.quota else None,
                quota_total_bytes=auth.quota.total_bytes if auth.quota else None,
            ),
        )

        self._logger.info(
            "storage_token_refresh_succeeded",
            credential_id=str(record.id),
            provider=record.provider_slug,
            expires_at=expires_at.isoformat() if expires_at else None,
        )
        return Success(value=auth.access_token)

    async def _mark_health(
        self, record: StorageCredential, health_status: HealthStatus
    ) -> None:
        if record.health_status is not health_status:
            await self._credential_repo.set_health_status(record.id, health_status)

    @staticmethod
    def _not_found(credential_id: UUID) -> IntegrationNotFoundError:
        return IntegrationNotFoundError(
            code=ErrorCode.INTEGRATION_NOT_FOUND,
            message="Storage integration not found",
            resource_id=str(credential_id),
        )
