"""Storage commands (write operations).

Commands represent user intent to change storage connection state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute the work and return Result types
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class BeginStorageConnect:
    """Start the OAuth consent flow for a storage provider.

    Attributes:
        owner_user_id: User connecting the drive.
        provider_slug: Registry key of the provider (e.g. "dropbox").
    """

    owner_user_id: UUID
    provider_slug: str


@dataclass(frozen=True, kw_only=True)
class ConnectStorage:
    """Complete the OAuth flow and store the resulting credential.

    The owning user is recovered from the one-time ``state`` token, not
    from the request, because the callback arrives via browser redirect.

    Attributes:
        provider_slug: Provider named in the callback URL.
        code: Authorization code from the provider.
        state: Anti-forgery state issued by BeginStorageConnect.

    Example:
        >>> command = ConnectStorage(provider_slug="dropbox", code=code, state=state)
        >>> result = await handler.handle(command)
    """

    provider_slug: str
    code: str
    state: str


@dataclass(frozen=True, kw_only=True)
class DisconnectStorage:
    """Disconnect a storage credential (soft delete).

    Attributes:
        credential_id: Credential to disconnect.
        owner_user_id: Requesting user (ownership is enforced).
    """

    credential_id: UUID
    owner_user_id: UUID


@dataclass(frozen=True, kw_only=True)
class ImportStorageFile:
    """Download one file from a connected drive into the temp directory.

    Attributes:
        credential_id: Integration holding the file.
        owner_user_id: Requesting user (ownership is enforced).
        file_id: Provider file id.
    """

    credential_id: UUID
    owner_user_id: UUID
    file_id: str


@dataclass(frozen=True, kw_only=True)
class BatchImportStorageFiles:
    """Import several files from one integration.

    Each file succeeds or fails on its own; one failed file does not
    discard the others.
    """

    credential_id: UUID
    owner_user_id: UUID
    file_ids: tuple[str, ...]
