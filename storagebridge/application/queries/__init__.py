"""Storage queries and their handlers.

Usage:
    from storagebridge.application.queries import ListStorageFiles
    from storagebridge.application.queries.handlers import ListStorageFilesHandler
"""

from storagebridge.application.queries.storage_queries import (
    ExportStorageFile,
    GetStorageDownloadUrl,
    GetStorageFilesBatch,
    GetStorageThumbnail,
    ListSharedDrives,
    ListStorageFiles,
    ListStorageIntegrations,
    SearchStorageFiles,
)

__all__ = [
    "ExportStorageFile",
    "GetStorageDownloadUrl",
    "GetStorageFilesBatch",
    "GetStorageThumbnail",
    "ListSharedDrives",
    "ListStorageFiles",
    "ListStorageIntegrations",
    "SearchStorageFiles",
]
