"""Domain entities."""

from storagebridge.domain.entities.storage_credential import StorageCredential

__all__ = ["StorageCredential"]
