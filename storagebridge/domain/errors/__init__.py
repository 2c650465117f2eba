"""Domain errors package.

Usage:
    from storagebridge.domain.errors import ProviderError, ReauthRequiredError
"""

from storagebridge.domain.errors.provider_error import (
    CapabilityNotSupportedError,
    MissingRefreshTokenError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderInvalidResponseError,
    ProviderNotConfiguredError,
    ProviderRateLimitError,
    ProviderTokenRefreshError,
    ProviderUnavailableError,
    StorageFileNotFoundError,
)
from storagebridge.domain.errors.storage_error import (
    IntegrationNotFoundError,
    MediaResolutionError,
    OAuthStateNotFoundError,
    ProviderNotFoundError,
    ReauthRequiredError,
)

__all__ = [
    "CapabilityNotSupportedError",
    "IntegrationNotFoundError",
    "MediaResolutionError",
    "MissingRefreshTokenError",
    "OAuthStateNotFoundError",
    "ProviderAuthenticationError",
    "ProviderError",
    "ProviderInvalidResponseError",
    "ProviderNotConfiguredError",
    "ProviderNotFoundError",
    "ProviderRateLimitError",
    "ProviderTokenRefreshError",
    "ProviderUnavailableError",
    "ReauthRequiredError",
    "StorageFileNotFoundError",
]
