"""Application service and handler factories.

Request-scoped: each request gets services bound to its own repository
(and therefore its own session). App-scoped collaborators (registry,
encryption, locks, state cache, filesystem) are shared.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import Depends

from storagebridge.application.services.token_lifecycle import TokenLifecycleManager
from storagebridge.core.config import get_settings
from storagebridge.core.container.infrastructure import (
    get_credential_locks,
    get_encryption_service,
    get_logger,
    get_media_filesystem,
    get_oauth_state_cache,
)
from storagebridge.core.container.providers import get_storage_registry
from storagebridge.core.container.repositories import (
    get_storage_credential_repository,
)
from storagebridge.infrastructure.persistence.repositories import (
    StorageCredentialRepository,
)

if TYPE_CHECKING:
    from storagebridge.application.commands.handlers import (
        BatchImportStorageFilesHandler,
        BeginStorageConnectHandler,
        ConnectStorageHandler,
        DisconnectStorageHandler,
        ImportStorageFileHandler,
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
    from storagebridge.application.services import MediaResolver


# ============================================================================
# Services
# ============================================================================


async def get_token_manager(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
) -> TokenLifecycleManager:
    """Get token lifecycle manager (request-scoped)."""
    return TokenLifecycleManager(
        credential_repo=credential_repo,
        encryption=get_encryption_service(),
        providers=get_storage_registry(),
        locks=get_credential_locks(),
        logger=get_logger(),
    )


async def get_media_resolver(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "MediaResolver":
    """Get media resolver (request-scoped).

    Usage:
        resolver = Depends(get_media_resolver)
        match await resolver.resolve(post.media, user_id):
            case Success(value=resolved):
                try:
                    await publish(resolved.references)
                finally:
                    resolved.cleanup()
    """
    from storagebridge.application.services import MediaResolver

    return MediaResolver(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
        filesystem=get_media_filesystem(),
        public_dir=Path(get_settings().public_media_dir),
        logger=get_logger(),
    )


# ============================================================================
# Command Handlers
# ============================================================================


async def get_begin_storage_connect_handler() -> "BeginStorageConnectHandler":
    """Get BeginStorageConnect handler (no request-scoped dependencies)."""
    from storagebridge.application.commands.handlers import (
        BeginStorageConnectHandler,
    )

    return BeginStorageConnectHandler(
        providers=get_storage_registry(),
        state_cache=get_oauth_state_cache(),
        logger=get_logger(),
    )


async def get_connect_storage_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
) -> "ConnectStorageHandler":
    """Get ConnectStorage handler (request-scoped)."""
    from storagebridge.application.commands.handlers import ConnectStorageHandler

    return ConnectStorageHandler(
        providers=get_storage_registry(),
        state_cache=get_oauth_state_cache(),
        encryption=get_encryption_service(),
        credential_repo=credential_repo,
        logger=get_logger(),
    )


async def get_disconnect_storage_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
) -> "DisconnectStorageHandler":
    """Get DisconnectStorage handler (request-scoped)."""
    from storagebridge.application.commands.handlers import DisconnectStorageHandler

    return DisconnectStorageHandler(
        credential_repo=credential_repo, logger=get_logger()
    )



async def get_import_file_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "ImportStorageFileHandler":
    """Get ImportStorageFile handler (request-scoped)."""
    from storagebridge.application.commands.handlers import ImportStorageFileHandler

    return ImportStorageFileHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
        filesystem=get_media_filesystem(),
        logger=get_logger(),
    )


async def get_batch_import_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "BatchImportStorageFilesHandler":
    """Get BatchImportStorageFiles handler (request-scoped)."""
    from storagebridge.application.commands.handlers import (
        BatchImportStorageFilesHandler,
    )

    return BatchImportStorageFilesHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
        filesystem=get_media_filesystem(),
        logger=get_logger(),
    )

# ============================================================================
# Query Handlers
# ============================================================================


async def get_list_integrations_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
) -> "ListStorageIntegrationsHandler":
    """Get ListStorageIntegrations handler (request-scoped)."""
    from storagebridge.application.queries.handlers import (
        ListStorageIntegrationsHandler,
    )

    return ListStorageIntegrationsHandler(credential_repo=credential_repo)


async def get_list_files_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "ListStorageFilesHandler":
    """Get ListStorageFiles handler (request-scoped)."""
    from storagebridge.application.queries.handlers import ListStorageFilesHandler

    return ListStorageFilesHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
    )


async def get_search_files_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "SearchStorageFilesHandler":
    """Get SearchStorageFiles handler (request-scoped)."""
    from storagebridge.application.queries.handlers import SearchStorageFilesHandler

    return SearchStorageFilesHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
    )


async def get_thumbnail_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "GetStorageThumbnailHandler":
    """Get GetStorageThumbnail handler (request-scoped)."""
    from storagebridge.application.queries.handlers import GetStorageThumbnailHandler

    return GetStorageThumbnailHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
    )


async def get_download_url_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "GetStorageDownloadUrlHandler":
    """Get GetStorageDownloadUrl handler (request-scoped)."""
    from storagebridge.application.queries.handlers import (
        GetStorageDownloadUrlHandler,
    )

    return GetStorageDownloadUrlHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
    )


async def get_files_batch_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "GetStorageFilesBatchHandler":
    """Get GetStorageFilesBatch handler (request-scoped)."""
    from storagebridge.application.queries.handlers import GetStorageFilesBatchHandler

    return GetStorageFilesBatchHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
    )


async def get_shared_drives_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "ListSharedDrivesHandler":
    """Get ListSharedDrives handler (request-scoped)."""
    from storagebridge.application.queries.handlers import ListSharedDrivesHandler

    return ListSharedDrivesHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
    )


async def get_export_file_handler(
    credential_repo: StorageCredentialRepository = Depends(
        get_storage_credential_repository
    ),
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
) -> "ExportStorageFileHandler":
    """Get ExportStorageFile handler (request-scoped)."""
    from storagebridge.application.queries.handlers import ExportStorageFileHandler

    return ExportStorageFileHandler(
        credential_repo=credential_repo,
        token_manager=token_manager,
        providers=get_storage_registry(),
    )
