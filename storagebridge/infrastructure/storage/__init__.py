"""Local media storage."""

from storagebridge.infrastructure.storage.local_filesystem import LocalMediaFilesystem

__all__ = ["LocalMediaFilesystem"]
