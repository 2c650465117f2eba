"""Google Drive JSON mappers."""

from storagebridge.infrastructure.providers.google_drive.mappers.file_mapper import (
    GoogleDriveFileMapper,
)

__all__ = ["GoogleDriveFileMapper"]
