"""Storage queries (read operations).

Queries are immutable dataclasses; handlers fetch and return data. Every
query that names an integration carries the requesting user so the
handler can scope the lookup by owner.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class ListStorageIntegrations:
    """List the user's connected drives."""

    owner_user_id: UUID


@dataclass(frozen=True, kw_only=True)
class ListStorageFiles:
    """List one page of a folder in a connected drive.

    Attributes:
        credential_id: Integration to browse.
        owner_user_id: Requesting user.
        folder_id: Folder to list; provider root when None.
        page_token: Opaque token from the previous page.
    """

    credential_id: UUID
    owner_user_id: UUID
    folder_id: str | None = None
    page_token: str | None = None


@dataclass(frozen=True, kw_only=True)
class SearchStorageFiles:
    """Search a connected drive by name (SEARCH capability)."""

    credential_id: UUID
    owner_user_id: UUID
    query: str
    mime_type: str | None = None
    folder_id: str | None = None
    page_token: str | None = None
    page_size: int | None = None


@dataclass(frozen=True, kw_only=True)
class GetStorageThumbnail:
    """Get a thumbnail URL for one file (THUMBNAIL capability)."""

    credential_id: UUID
    owner_user_id: UUID
    file_id: str
    size: int = 256


@dataclass(frozen=True, kw_only=True)
class GetStorageDownloadUrl:
    """Get a direct download URL for one file."""

    credential_id: UUID
    owner_user_id: UUID
    file_id: str


@dataclass(frozen=True, kw_only=True)
class GetStorageFilesBatch:
    """Fetch metadata for several files at once (BATCH_METADATA capability).

    Files that cannot be read are left out of the result.
    """

    credential_id: UUID
    owner_user_id: UUID
    file_ids: tuple[str, ...]


@dataclass(frozen=True, kw_only=True)
class ListSharedDrives:
    """List shared drives visible to the account (SHARED_DRIVES capability)."""

    credential_id: UUID
    owner_user_id: UUID


@dataclass(frozen=True, kw_only=True)
class ExportStorageFile:
    """Export a document to a downloadable format (EXPORT capability).

    Attributes:
        credential_id: Integration holding the document.
        owner_user_id: Requesting user.
        file_id: Document to export.
        export_format: Extension ("pdf") or MIME type; None picks the
            provider default for the document type.
    """

    credential_id: UUID
    owner_user_id: UUID
    file_id: str
    export_format: str | None = None
