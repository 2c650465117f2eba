"""Provider error types for the storage provider contract.

These errors are part of the StorageProviderProtocol contract: they define
the failure cases a provider adapter can return. Every provider error names
the adapter (``provider_name``) and the failing operation (``operation``),
so callers above the adapter never see a raw HTTP or SDK failure.

Architecture:
- Domain layer errors (part of protocol contract)
- Inherit from DomainError (core layer)
- Used in Result types (railway-oriented programming)

Usage:
    async def get_file(
        self, access_token: str, file_id: str
    ) -> Result[StorageFile, ProviderError]:
        if response.status_code == 404:
            return Failure(error=StorageFileNotFoundError(...))
        return Success(value=file)
"""

from dataclasses import dataclass
from typing import Any

from storagebridge.core.errors import DomainError
from storagebridge.domain.enums import StorageCapability


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderError(DomainError):
    """Base storage provider error.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        provider_name: Adapter identifier (google-drive, dropbox).
        operation: Adapter operation that failed (list_files, refresh, ...).
        details: Additional context (API error code, response).
    """

    provider_name: str
    operation: str | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderNotConfiguredError(ProviderError):
    """Provider is disabled at deploy time (client id/secret/redirect missing).

    Recovery: none at runtime; the feature is unavailable, not an incident.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderAuthenticationError(ProviderError):
    """Provider rejected credentials.

    Raised when:
    - OAuth authorization code is invalid or expired
    - Access token is invalid or expired
    - Token response carries no access token

    Recovery: User must reconnect the account.

    Attributes:
        is_token_expired: Whether the error is due to token expiration.
    """

    is_token_expired: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderTokenRefreshError(ProviderError):
    """Provider rejected a refresh token.

    Recovery: User must reconnect the account.
    """

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class MissingRefreshTokenError(ProviderError):
    """Refresh was requested with an empty refresh token."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderUnavailableError(ProviderError):
    """Provider API is unavailable (5xx, timeout, connection failure).

    Recovery: Caller may retry with backoff.

    Attributes:
        is_transient: Whether the error is likely transient (True = retry).
        retry_after: Suggested retry delay in seconds (from provider).
    """

    is_transient: bool = True
    retry_after: int | None = None

    @property
    def is_retryable(self) -> bool:
        return self.is_transient


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderRateLimitError(ProviderError):
    """Provider rate limit exceeded (429).

    Attributes:
        retry_after: Seconds to wait before retrying (from Retry-After header).
    """

    retry_after: int | None = None

    @property
    def is_retryable(self) -> bool:
        return True


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderInvalidResponseError(ProviderError):
    """Provider returned an invalid or unexpected response.

    Attributes:
        response_body: Truncated raw response body for debugging.
    """

    response_body: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class StorageFileNotFoundError(ProviderError):
    """Provider reports the requested file does not exist.

    Terminal for the reference; never retried automatically.

    Attributes:
        file_id: Provider file identifier that was not found.
    """

    file_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class CapabilityNotSupportedError(ProviderError):
    """Optional operation invoked on an adapter that does not implement it.

    Indicates a programming or configuration error.

    Attributes:
        capability: The missing capability.
    """

    capability: StorageCapability
