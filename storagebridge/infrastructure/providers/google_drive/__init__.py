"""Google Drive storage adapter."""

from storagebridge.infrastructure.providers.google_drive.google_drive_provider import (
    GoogleDriveProvider,
)

__all__ = ["GoogleDriveProvider"]
