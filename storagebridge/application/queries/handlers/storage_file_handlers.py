"""Query handlers that browse files inside a connected drive.

Each handler resolves the integration by id AND owner (a foreign or
disabled credential is reported as IntegrationNotFound), obtains a valid
access token through the token lifecycle manager, then makes exactly one
adapter call.
"""

from uuid import UUID

from storagebridge.application.queries.storage_queries import (
    ExportStorageFile,
    GetStorageDownloadUrl,
    GetStorageFilesBatch,
    GetStorageThumbnail,
    ListSharedDrives,
    ListStorageFiles,
    SearchStorageFiles,
)
from storagebridge.application.services.token_lifecycle import TokenLifecycleManager
from storagebridge.core.enums import ErrorCode
from storagebridge.core.errors import DomainError
from storagebridge.core.result import Failure, Result, Success
from storagebridge.domain.enums import StorageCapability
from storagebridge.domain.errors import (
    CapabilityNotSupportedError,
    IntegrationNotFoundError,
)
from storagebridge.domain.protocols.storage_credential_repository import (
    StorageCredentialRepository,
)
from storagebridge.domain.protocols.storage_provider_protocol import (
    DownloadedFile,
    FileListing,
    SearchOptions,
    SharedDrive,
    StorageFile,
    StorageProviderLookup,
    StorageProviderProtocol,
)


class IntegrationScopedHandler:
    """Shared owner-scoped credential + token resolution.

    Also the base of the import command handlers, which need the same
    lookup before downloading.
    """

    def __init__(
        self,
        credential_repo: StorageCredentialRepository,
        token_manager: TokenLifecycleManager,
        providers: StorageProviderLookup,
    ) -> None:
        self._credential_repo = credential_repo
        self._token_manager = token_manager
        self._providers = providers

    async def _open(
        self,
        credential_id: UUID,
        owner_user_id: UUID,
        required: StorageCapability | None = None,
        operation: str | None = None,
    ) -> Result[tuple[StorageProviderProtocol, str], DomainError]:
        """Return (adapter, access token) for an owned, usable credential."""
        credential = await self._credential_repo.find_for_owner(
            credential_id, owner_user_id
        )
        if credential is None or not credential.is_usable():
            return Failure(
                error=IntegrationNotFoundError(
                    code=ErrorCode.INTEGRATION_NOT_FOUND,
                    message="Storage integration not found",
                    resource_id=str(credential_id),
                )
            )

        adapter_result = self._providers.get(credential.provider_slug)
        if isinstance(adapter_result, Failure):
            return adapter_result
        adapter = adapter_result.value

        if required is not None and required not in adapter.capabilities:
            return Failure(
                error=CapabilityNotSupportedError(
                    code=ErrorCode.STORAGE_CAPABILITY_NOT_SUPPORTED,
                    message=f"{adapter.display_name} does not support {required.value}",
                    provider_name=adapter.slug,
                    operation=operation,
                    capability=required,
                )
            )

        token_result = await self._token_manager.ensure_access_token(credential)
        if isinstance(token_result, Failure):
            return token_result
        return Success(value=(adapter, token_result.value))


class ListStorageFilesHandler(IntegrationScopedHandler):
    """Handler for ListStorageFiles query."""

    async def handle(self, query: ListStorageFiles) -> Result[FileListing, DomainError]:
        opened = await self._open(query.credential_id, query.owner_user_id)
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value
        return await adapter.list_files(
            access_token, folder_id=query.folder_id, page_token=query.page_token
        )


class SearchStorageFilesHandler(IntegrationScopedHandler):
    """Handler for SearchStorageFiles query."""

    async def handle(
        self, query: SearchStorageFiles
    ) -> Result[FileListing, DomainError]:
        opened = await self._open(
            query.credential_id,
            query.owner_user_id,
            StorageCapability.SEARCH,
            "search_files",
        )
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value
        return await adapter.search_files(
            access_token,
            SearchOptions(
                query=query.query,
                mime_type=query.mime_type,
                folder_id=query.folder_id,
                page_token=query.page_token,
                page_size=query.page_size,
            ),
        )


class GetStorageThumbnailHandler(IntegrationScopedHandler):
    """Handler for GetStorageThumbnail query.

    Returns Success(None) when the provider has no thumbnail for the file.
    """

    async def handle(
        self, query: GetStorageThumbnail
    ) -> Result[str | None, DomainError]:
        opened = await self._open(
            query.credential_id,
            query.owner_user_id,
            StorageCapability.THUMBNAIL,
            "get_thumbnail",
        )
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value
        return await adapter.get_thumbnail(access_token, query.file_id, query.size)


class GetStorageDownloadUrlHandler(IntegrationScopedHandler):
    """Handler for GetStorageDownloadUrl query."""

    async def handle(
        self, query: GetStorageDownloadUrl
    ) -> Result[str, DomainError]:
        opened = await self._open(query.credential_id, query.owner_user_id)
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value
        return await adapter.get_download_url(access_token, query.file_id)


class GetStorageFilesBatchHandler(IntegrationScopedHandler):
    """Handler for GetStorageFilesBatch query."""

    async def handle(
        self, query: GetStorageFilesBatch
    ) -> Result[list[StorageFile], DomainError]:
        opened = await self._open(
            query.credential_id,
            query.owner_user_id,
            StorageCapability.BATCH_METADATA,
            "batch_get_files",
        )
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value
        return await adapter.batch_get_files(access_token, list(query.file_ids))


class ListSharedDrivesHandler(IntegrationScopedHandler):
    """Handler for ListSharedDrives query."""

    async def handle(
        self, query: ListSharedDrives
    ) -> Result[list[SharedDrive], DomainError]:
        opened = await self._open(
            query.credential_id,
            query.owner_user_id,
            StorageCapability.SHARED_DRIVES,
            "list_shared_drives",
        )
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value
        return await adapter.list_shared_drives(access_token)


class ExportStorageFileHandler(IntegrationScopedHandler):
    """Handler for ExportStorageFile query.

    On success the caller owns the returned stream and must consume it or
    call ``aclose()``.
    """

    async def handle(
        self, query: ExportStorageFile
    ) -> Result[DownloadedFile, DomainError]:
        opened = await self._open(
            query.credential_id,
            query.owner_user_id,
            StorageCapability.EXPORT,
            "export_file",
        )
        if isinstance(opened, Failure):
            return opened
        adapter, access_token = opened.value
        return await adapter.export_file(
            access_token, query.file_id, query.export_format
        )
