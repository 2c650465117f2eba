"""Storage request and response schemas.

Pydantic schemas for the storage API. Response schemas convert from
application DTOs / provider data types via ``from_*`` classmethods.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from storagebridge.application.commands.handlers import BatchImportItem, ImportedFile
from storagebridge.application.queries.handlers.list_integrations_handler import (
    StorageIntegrationResult,
)
from storagebridge.core.constants import BATCH_FILE_IDS_MAX
from storagebridge.domain.entities import StorageCredential
from storagebridge.domain.protocols.storage_provider_protocol import (
    FileListing,
    SharedDrive,
    StorageFile,
)
from storagebridge.infrastructure.providers.provider_registry import ProviderSummary


# =============================================================================
# Providers
# =============================================================================


class StorageProviderResponse(BaseModel):
    """One registered storage provider."""

    slug: str = Field(..., description="Provider identifier", examples=["dropbox"])
    display_name: str = Field(..., description="Human-readable name")
    is_configured: bool = Field(
        ..., description="Whether this deployment can connect the provider"
    )
    capabilities: list[str] = Field(
        default_factory=list, description="Optional operations supported"
    )

    @classmethod
    def from_summary(cls, summary: ProviderSummary) -> "StorageProviderResponse":
        return cls(
            slug=summary.slug,
            display_name=summary.display_name,
            is_configured=summary.is_configured,
            capabilities=sorted(c.value for c in summary.capabilities),
        )


class StorageProviderListResponse(BaseModel):
    providers: list[StorageProviderResponse]


class AuthorizationUrlResponse(BaseModel):
    """Consent URL the client should redirect the user to."""

    authorization_url: str = Field(..., description="Provider consent URL")
    state: str = Field(..., description="Anti-forgery state embedded in the URL")


# =============================================================================
# Integrations
# =============================================================================


class StorageIntegrationResponse(BaseModel):
    """Connected drive (token material is never exposed)."""

    id: UUID
    provider_slug: str
    display_name: str = ""
    email: str = ""
    picture_url: str | None = None
    disabled: bool = False
    health_status: str
    expires_at: datetime | None = None
    quota_used_bytes: int | None = None
    quota_total_bytes: int | None = None
    created_at: datetime

    @classmethod
    def from_dto(cls, dto: StorageIntegrationResult) -> "StorageIntegrationResponse":
        return cls(
            id=dto.id,
            provider_slug=dto.provider_slug,
            display_name=dto.display_name,
            email=dto.email,
            picture_url=dto.picture_url,
            disabled=dto.disabled,
            health_status=dto.health_status,
            expires_at=dto.expires_at,
            quota_used_bytes=dto.quota_used_bytes,
            quota_total_bytes=dto.quota_total_bytes,
            created_at=dto.created_at,
        )

    @classmethod
    def from_entity(cls, credential: StorageCredential) -> "StorageIntegrationResponse":
        return cls.from_dto(StorageIntegrationResult.from_entity(credential))


class StorageIntegrationListResponse(BaseModel):
    integrations: list[StorageIntegrationResponse]
    total_count: int


# =============================================================================
# Files
# =============================================================================


class StorageFileResponse(BaseModel):
    """File metadata normalized across providers."""

    id: str
    name: str
    mime_type: str = ""
    size_bytes: int = 0
    modified_time: str = ""
    is_folder: bool = False
    path: str | None = None
    thumbnail_url: str | None = None
    web_content_link: str | None = None

    @classmethod
    def from_file(cls, file: StorageFile) -> "StorageFileResponse":
        return cls(
            id=file.id,
            name=file.name,
            mime_type=file.mime_type,
            size_bytes=file.size_bytes,
            modified_time=file.modified_time,
            is_folder=file.is_folder,
            path=file.path,
            thumbnail_url=file.thumbnail_url,
            web_content_link=file.web_content_link,
        )


class FileListResponse(BaseModel):
    files: list[StorageFileResponse]
    next_page_token: str | None = Field(
        None, description="Pass back unmodified to fetch the next page"
    )

    @classmethod
    def from_listing(cls, listing: FileListing) -> "FileListResponse":
        return cls(
            files=[StorageFileResponse.from_file(f) for f in listing.files],
            next_page_token=listing.next_page_token,
        )


class ThumbnailResponse(BaseModel):
    thumbnail_url: str | None = Field(
        None, description="Thumbnail URL or data URL; null when unavailable"
    )


class DownloadUrlResponse(BaseModel):
    url: str = Field(..., description="Direct download URL for the file")


class FileIdsRequest(BaseModel):
    """File ids for batch metadata and batch import."""

    file_ids: list[str] = Field(
        ...,
        min_length=1,
        max_length=BATCH_FILE_IDS_MAX,
        description="Provider file ids",
    )


class StorageFileBatchResponse(BaseModel):
    """Metadata for the requested files that could be read."""

    files: list[StorageFileResponse]

    @classmethod
    def from_files(cls, files: list[StorageFile]) -> "StorageFileBatchResponse":
        return cls(files=[StorageFileResponse.from_file(f) for f in files])


class ExportRequest(BaseModel):
    format: str | None = Field(
        None,
        description="Extension or MIME type; omitted picks the default format",
        examples=["pdf", "text/csv"],
    )


# =============================================================================
# Shared drives
# =============================================================================


class SharedDriveResponse(BaseModel):
    id: str
    name: str


class SharedDriveListResponse(BaseModel):
    drives: list[SharedDriveResponse]

    @classmethod
    def from_drives(cls, drives: list[SharedDrive]) -> "SharedDriveListResponse":
        return cls(drives=[SharedDriveResponse(id=d.id, name=d.name) for d in drives])


# =============================================================================
# Imports
# =============================================================================


class ImportedFileResponse(BaseModel):
    """File copied into the server temp directory."""

    file_id: str
    path: str = Field(..., description="Absolute path of the imported copy")
    filename: str
    mime_type: str
    size_bytes: int

    @classmethod
    def from_imported(cls, imported: ImportedFile) -> "ImportedFileResponse":
        return cls(
            file_id=imported.file_id,
            path=str(imported.path),
            filename=imported.filename,
            mime_type=imported.mime_type,
            size_bytes=imported.size_bytes,
        )


class ImportErrorResponse(BaseModel):
    code: str
    message: str


class BatchImportItemResponse(BaseModel):
    file_id: str
    success: bool
    file: ImportedFileResponse | None = None
    error: ImportErrorResponse | None = None

    @classmethod
    def from_item(cls, item: BatchImportItem) -> "BatchImportItemResponse":
        return cls(
            file_id=item.file_id,
            success=item.success,
            file=ImportedFileResponse.from_imported(item.imported)
            if item.imported
            else None,
            error=ImportErrorResponse(
                code=item.error.code.value, message=item.error.message
            )
            if item.error
            else None,
        )


class BatchImportResponse(BaseModel):
    results: list[BatchImportItemResponse]
    imported_count: int
