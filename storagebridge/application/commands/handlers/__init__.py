"""Storage command handlers."""

from storagebridge.application.commands.handlers.begin_storage_connect_handler import (
    BeginStorageConnectHandler,
)
from storagebridge.application.commands.handlers.connect_storage_handler import (
    ConnectStorageHandler,
)
from storagebridge.application.commands.handlers.disconnect_storage_handler import (
    DisconnectStorageHandler,
)
from storagebridge.application.commands.handlers.import_storage_file_handler import (
    BatchImportItem,
    BatchImportStorageFilesHandler,
    ImportedFile,
    ImportStorageFileHandler,
)

__all__ = [
    "BatchImportItem",
    "BatchImportStorageFilesHandler",
    "BeginStorageConnectHandler",
    "ConnectStorageHandler",
    "DisconnectStorageHandler",
    "ImportedFile",
    "ImportStorageFileHandler",
]
