"""Storage routes.

Thin HTTP surface over the storage subsystem. Handlers return Result
values; failures become RFC 9457 responses via ErrorResponseBuilder.

Routes (prefix from settings.api_prefix, default /api/storage):
    GET    /providers
    GET    /callback/{provider}
    GET    /{provider}/connect
    GET    /integrations
    DELETE /integrations/{integration_id}
    GET    /integrations/{integration_id}/files
    GET    /integrations/{integration_id}/search
    GET    /integrations/{integration_id}/files/{file_id}/thumbnail
    GET    /integrations/{integration_id}/files/{file_id}/download-url
    POST   /integrations/{integration_id}/files/batch
    POST   /integrations/{integration_id}/files/{file_id}/export
    POST   /integrations/{integration_id}/files/{file_id}/import
    POST   /integrations/{integration_id}/import
    GET    /integrations/{integration_id}/shared-drives

Every integration route is owner-scoped: another user's integration is
reported as 404. Operations behind an optional capability answer 501 when
the provider lacks it.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from storagebridge.application.commands import (
    BatchImportStorageFiles,
    BeginStorageConnect,
    ConnectStorage,
    DisconnectStorage,
    ImportStorageFile,
)
from storagebridge.application.commands.handlers import (
    BatchImportStorageFilesHandler,
    BeginStorageConnectHandler,
    ConnectStorageHandler,
    DisconnectStorageHandler,
    ImportStorageFileHandler,
)
from storagebridge.application.queries import (
    ExportStorageFile,
    GetStorageDownloadUrl,
    GetStorageFilesBatch,
    GetStorageThumbnail,
    ListSharedDrives,
    ListStorageFiles,
    ListStorageIntegrations,
    SearchStorageFiles,
)
from storagebridge.application.queries.handlers import (
    ExportStorageFileHandler,
    GetStorageDownloadUrlHandler,
    GetStorageFilesBatchHandler,
    GetStorageThumbnailHandler,
    ListSharedDrivesHandler,
    ListStorageFilesHandler,
    ListStorageIntegrationsHandler,
    SearchStorageFilesHandler,
)
from storagebridge.application.services.media_resolver import sanitize_filename
from storagebridge.core.constants import THUMBNAIL_SIZE_DEFAULT
from storagebridge.core.container import (
    get_batch_import_handler,
    get_begin_storage_connect_handler,
    get_connect_storage_handler,
    get_disconnect_storage_handler,
    get_download_url_handler,
    get_export_file_handler,
    get_files_batch_handler,
    get_import_file_handler,
    get_list_files_handler,
    get_list_integrations_handler,
    get_search_files_handler,
    get_shared_drives_handler,
    get_storage_registry,
    get_thumbnail_handler,
)
from storagebridge.core.result import Failure, Success
from storagebridge.infrastructure.providers.provider_registry import (
    StorageProviderRegistry,
)
from storagebridge.presentation.dependencies import CurrentUserId
from storagebridge.presentation.errors import ErrorResponseBuilder
from storagebridge.schemas.storage_schemas import (
    AuthorizationUrlResponse,
    BatchImportItemResponse,
    BatchImportResponse,
    DownloadUrlResponse,
    ExportRequest,
    FileIdsRequest,
    FileListResponse,
    ImportedFileResponse,
    SharedDriveListResponse,
    StorageFileBatchResponse,
    StorageIntegrationListResponse,
    StorageIntegrationResponse,
    StorageProviderListResponse,
    StorageProviderResponse,
    ThumbnailResponse,
)

router = APIRouter(tags=["storage"])

IntegrationId = Annotated[UUID, Path(description="Storage integration id")]


# =============================================================================
# Providers and OAuth
# =============================================================================


@router.get("/providers", response_model=StorageProviderListResponse)
async def list_providers(
    registry: StorageProviderRegistry = Depends(get_storage_registry),
) -> StorageProviderListResponse:
    """List registered providers, configured or not."""
    return StorageProviderListResponse(
        providers=[
            StorageProviderResponse.from_summary(s) for s in registry.list_providers()
        ]
    )


@router.get("/callback/{provider}", response_model=StorageIntegrationResponse)
async def oauth_callback(
    request: Request,
    provider: str,
    code: Annotated[str, Query(min_length=1)],
    state: Annotated[str, Query(min_length=1)],
    handler: ConnectStorageHandler = Depends(get_connect_storage_handler),
) -> StorageIntegrationResponse | JSONResponse:
    """Complete the OAuth flow; the user is identified by ``state``."""
    result = await handler.handle(
        ConnectStorage(provider_slug=provider, code=code, state=state)
    )
    match result:
        case Success(value=credential):
            return StorageIntegrationResponse.from_entity(credential)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


# Declared after /callback/{provider} so "callback" is never read as a slug.
@router.get("/{provider}/connect", response_model=AuthorizationUrlResponse)
async def begin_connect(
    request: Request,
    provider: str,
    user_id: CurrentUserId,
    handler: BeginStorageConnectHandler = Depends(get_begin_storage_connect_handler),
) -> AuthorizationUrlResponse | JSONResponse:
    """Return the consent URL for ``provider``."""
    result = await handler.handle(
        BeginStorageConnect(owner_user_id=user_id, provider_slug=provider)
    )
    match result:
        case Success(value=auth):
            return AuthorizationUrlResponse(
                authorization_url=auth.authorization_url, state=auth.state
            )
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


# =============================================================================
# Integrations
# =============================================================================


@router.get("/integrations", response_model=StorageIntegrationListResponse)
async def list_integrations(
    user_id: CurrentUserId,
    handler: ListStorageIntegrationsHandler = Depends(get_list_integrations_handler),
) -> StorageIntegrationListResponse:
    result = await handler.handle(ListStorageIntegrations(owner_user_id=user_id))
    dtos = result.value if isinstance(result, Success) else []
    integrations = [StorageIntegrationResponse.from_dto(dto) for dto in dtos]
    return StorageIntegrationListResponse(
        integrations=integrations, total_count=len(integrations)
    )


@router.delete(
    "/integrations/{integration_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
)
async def disconnect_integration(
    request: Request,
    integration_id: IntegrationId,
    user_id: CurrentUserId,
    handler: DisconnectStorageHandler = Depends(get_disconnect_storage_handler),
) -> Response:
    result = await handler.handle(
        DisconnectStorage(credential_id=integration_id, owner_user_id=user_id)
    )
    if isinstance(result, Failure):
        return ErrorResponseBuilder.from_domain_error(result.error, request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/integrations/{integration_id}/files", response_model=FileListResponse)
async def list_files(
    request: Request,
    integration_id: IntegrationId,
    user_id: CurrentUserId,
    folder_id: str | None = None,
    page_token: str | None = None,
    handler: ListStorageFilesHandler = Depends(get_list_files_handler),
) -> FileListResponse | JSONResponse:
    result = await handler.handle(
        ListStorageFiles(
            credential_id=integration_id,
            owner_user_id=user_id,
            folder_id=folder_id,
            page_token=page_token,
        )
    )
    match result:
        case Success(value=listing):
            return FileListResponse.from_listing(listing)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.get("/integrations/{integration_id}/search", response_model=FileListResponse)
async def search_files(
    request: Request,
    integration_id: IntegrationId,
    user_id: CurrentUserId,
    q: Annotated[str, Query(min_length=1, description="Name search")],
    mime_type: str | None = None,
    folder_id: str | None = None,
    page_token: str | None = None,
    page_size: Annotated[int | None, Query(ge=1, le=1000)] = None,
    handler: SearchStorageFilesHandler = Depends(get_search_files_handler),
) -> FileListResponse | JSONResponse:
    result = await handler.handle(
        SearchStorageFiles(
            credential_id=integration_id,
            owner_user_id=user_id,
            query=q,
            mime_type=mime_type,
            folder_id=folder_id,
            page_token=page_token,
            page_size=page_size,
        )
    )
    match result:
        case Success(value=listing):
            return FileListResponse.from_listing(listing)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.get(
    "/integrations/{integration_id}/files/{file_id}/thumbnail",
    response_model=ThumbnailResponse,
)
async def get_thumbnail(
    request: Request,
    integration_id: IntegrationId,
    file_id: str,
    user_id: CurrentUserId,
    size: Annotated[int, Query(ge=16, le=2048)] = THUMBNAIL_SIZE_DEFAULT,
    handler: GetStorageThumbnailHandler = Depends(get_thumbnail_handler),
) -> ThumbnailResponse | JSONResponse:
    result = await handler.handle(
        GetStorageThumbnail(
            credential_id=integration_id,
            owner_user_id=user_id,
            file_id=file_id,
            size=size,
        )
    )
    match result:
        case Success(value=url):
            return ThumbnailResponse(thumbnail_url=url)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.get(
    "/integrations/{integration_id}/files/{file_id}/download-url",
    response_model=DownloadUrlResponse,
)
async def get_download_url(
    request: Request,
    integration_id: IntegrationId,
    file_id: str,
    user_id: CurrentUserId,
    handler: GetStorageDownloadUrlHandler = Depends(get_download_url_handler),
) -> DownloadUrlResponse | JSONResponse:
    result = await handler.handle(
        GetStorageDownloadUrl(
            credential_id=integration_id, owner_user_id=user_id, file_id=file_id
        )
    )
    match result:
        case Success(value=url):
            return DownloadUrlResponse(url=url)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.post(
    "/integrations/{integration_id}/files/batch",
    response_model=StorageFileBatchResponse,
)
async def get_files_batch(
    request: Request,
    integration_id: IntegrationId,
    body: FileIdsRequest,
    user_id: CurrentUserId,
    handler: GetStorageFilesBatchHandler = Depends(get_files_batch_handler),
) -> StorageFileBatchResponse | JSONResponse:
    """Metadata for several files; unreadable files are left out."""
    result = await handler.handle(
        GetStorageFilesBatch(
            credential_id=integration_id,
            owner_user_id=user_id,
            file_ids=tuple(body.file_ids),
        )
    )
    match result:
        case Success(value=files):
            return StorageFileBatchResponse.from_files(files)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.post(
    "/integrations/{integration_id}/files/{file_id}/export",
    response_class=StreamingResponse,
)
async def export_file(
    request: Request,
    integration_id: IntegrationId,
    file_id: str,
    user_id: CurrentUserId,
    body: ExportRequest | None = None,
    handler: ExportStorageFileHandler = Depends(get_export_file_handler),
) -> Response:
    """Stream a document converted to ``format`` as an attachment."""
    result = await handler.handle(
        ExportStorageFile(
            credential_id=integration_id,
            owner_user_id=user_id,
            file_id=file_id,
            export_format=body.format if body else None,
        )
    )
    match result:
        case Success(value=exported):
            filename = sanitize_filename(exported.filename, file_id)
            return StreamingResponse(
                exported.iter_bytes(),
                media_type=exported.mime_type,
                headers={"Content-Disposition": f'attachment; filename="{filename}"'},
                background=BackgroundTask(exported.aclose),
            )
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.post(
    "/integrations/{integration_id}/files/{file_id}/import",
    response_model=ImportedFileResponse,
)
async def import_file(
    request: Request,
    integration_id: IntegrationId,
    file_id: str,
    user_id: CurrentUserId,
    handler: ImportStorageFileHandler = Depends(get_import_file_handler),
) -> ImportedFileResponse | JSONResponse:
    """Copy one file into the server temp directory."""
    result = await handler.handle(
        ImportStorageFile(
            credential_id=integration_id, owner_user_id=user_id, file_id=file_id
        )
    )
    match result:
        case Success(value=imported):
            return ImportedFileResponse.from_imported(imported)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.post(
    "/integrations/{integration_id}/import", response_model=BatchImportResponse
)
async def batch_import(
    request: Request,
    integration_id: IntegrationId,
    body: FileIdsRequest,
    user_id: CurrentUserId,
    handler: BatchImportStorageFilesHandler = Depends(get_batch_import_handler),
) -> BatchImportResponse | JSONResponse:
    """Import several files; each result reports its own success."""
    result = await handler.handle(
        BatchImportStorageFiles(
            credential_id=integration_id,
            owner_user_id=user_id,
            file_ids=tuple(body.file_ids),
        )
    )
    match result:
        case Success(value=items):
            results = [BatchImportItemResponse.from_item(item) for item in items]
            return BatchImportResponse(
                results=results,
                imported_count=sum(1 for item in results if item.success),
            )
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.get(
    "/integrations/{integration_id}/shared-drives",
    response_model=SharedDriveListResponse,
)
async def list_shared_drives(
    request: Request,
    integration_id: IntegrationId,
    user_id: CurrentUserId,
    handler: ListSharedDrivesHandler = Depends(get_shared_drives_handler),
) -> SharedDriveListResponse | JSONResponse:
    result = await handler.handle(
        ListSharedDrives(credential_id=integration_id, owner_user_id=user_id)
    )
    match result:
        case Success(value=drives):
            return SharedDriveListResponse.from_drives(drives)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
