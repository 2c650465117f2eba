"""Storage query handlers."""

from storagebridge.application.queries.handlers.list_integrations_handler import (
    ListStorageIntegrationsHandler,
)
from storagebridge.application.queries.handlers.storage_file_handlers import (
    ExportStorageFileHandler,
    GetStorageDownloadUrlHandler,
    GetStorageFilesBatchHandler,
    GetStorageThumbnailHandler,
    IntegrationScopedHandler,
    ListSharedDrivesHandler,
    ListStorageFilesHandler,
    SearchStorageFilesHandler,
)

__all__ = [
    "ExportStorageFileHandler",
    "GetStorageDownloadUrlHandler",
    "GetStorageFilesBatchHandler",
    "GetStorageThumbnailHandler",
    "IntegrationScopedHandler",
    "ListSharedDrivesHandler",
    "ListStorageFilesHandler",
    "ListStorageIntegrationsHandler",
    "SearchStorageFilesHandler",
]
