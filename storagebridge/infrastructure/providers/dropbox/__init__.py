"""Dropbox storage adapter."""

from storagebridge.infrastructure.providers.dropbox.dropbox_provider import (
    DropboxProvider,
)

__all__ = ["DropboxProvider"]
