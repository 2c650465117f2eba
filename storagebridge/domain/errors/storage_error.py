"""Storage credential and media resolution errors.

Architecture:
- Domain layer errors returned by the token lifecycle manager, the
  provider registry, the OAuth state cache and the media resolver
- Inherit from DomainError / NotFoundError (core layer)
"""

from dataclasses import dataclass

from storagebridge.core.errors import DomainError, NotFoundError


@dataclass(frozen=True, slots=True, kw_only=True)
class IntegrationNotFoundError(NotFoundError):
    """Credential absent, deleted, disabled or owned by another user.

    Callers map this to a 404 without distinguishing the reasons, so the
    existence of other users' credentials is never revealed.
    """

    resource_type: str = "StorageCredential"


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderNotFoundError(NotFoundError):
    """No adapter registered under the requested provider identifier."""

    resource_type: str = "StorageProvider"


@dataclass(frozen=True, slots=True, kw_only=True)
class OAuthStateNotFoundError(NotFoundError):
    """OAuth state token unknown, expired, already used or unreadable."""

    resource_type: str = "OAuthState"


@dataclass(frozen=True, slots=True, kw_only=True)
class ReauthRequiredError(DomainError):
    """Access token expired and no refresh token is stored.

    The credential stays unusable until the user reconnects the account.
    Never retried automatically.

    Attributes:
        credential_id: Credential that needs reconnecting.
        provider_name: Provider the credential belongs to.
    """

    credential_id: str
    provider_name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class MediaResolutionError(DomainError):
    """Filesystem failure while staging a downloaded file.

    Attributes:
        path: Path involved in the failed operation.
    """

    path: str | None = None
