"""Storage commands and their handlers.

Usage:
    from storagebridge.application.commands import ConnectStorage
    from storagebridge.application.commands.handlers import ConnectStorageHandler
"""

from storagebridge.application.commands.storage_commands import (
    BatchImportStorageFiles,
    BeginStorageConnect,
    ConnectStorage,
    DisconnectStorage,
    ImportStorageFile,
)

__all__ = [
    "BatchImportStorageFiles",
    "BeginStorageConnect",
    "ConnectStorage",
    "DisconnectStorage",
    "ImportStorageFile",
]
