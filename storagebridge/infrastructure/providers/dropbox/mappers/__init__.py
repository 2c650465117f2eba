"""Dropbox JSON mappers."""

from storagebridge.infrastructure.providers.dropbox.mappers.file_mapper import (
    DropboxFileMapper,
)

__all__ = ["DropboxFileMapper"]
