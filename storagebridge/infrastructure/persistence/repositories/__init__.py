"""Repository implementations."""

from storagebridge.infrastructure.persistence.repositories.storage_credential_repository import (
    StorageCredentialRepository,
)

__all__ = ["StorageCredentialRepository"]
